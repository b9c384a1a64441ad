"""Attachment-aware explanation service."""

__version__ = "0.1.0"
