"""Core — registry, resolution, execution and inspection."""
