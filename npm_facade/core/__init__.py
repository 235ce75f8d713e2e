"""Core — models, configuration, services."""
