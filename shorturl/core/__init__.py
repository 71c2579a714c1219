"""Core module for the short URL service."""

from shorturl.core.config import settings

__all__ = ["settings"]
