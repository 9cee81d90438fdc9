# ABOUTME: Utility package for the Azure TTS client
# ABOUTME: Holds SSML construction, retry policy, TTL caches and playback buffering
