"""Transcribes audio files as they land in object storage."""

__version__ = "0.1.0"
