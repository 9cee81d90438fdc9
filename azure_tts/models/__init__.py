# ABOUTME: Data models package for the Azure TTS client
# ABOUTME: Holds voices, request parameters, streaming value types, output formats and errors
