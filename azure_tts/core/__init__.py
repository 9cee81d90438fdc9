# ABOUTME: Core services package for the Azure TTS client
# ABOUTME: Holds authentication, validation, builders, the streaming transport and the synthesis services
