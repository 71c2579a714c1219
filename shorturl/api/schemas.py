"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Optional

from pydantic import BaseModel


class ShortURLResponse(BaseModel):
    """A stored mapping as returned to clients."""
    original_url: str
    short_url: int


class ErrorResponse(BaseModel):
    """Error body; error responses carry only a message."""
    error: str


class ServerErrorResponse(ErrorResponse):
    """Error body for unexpected failures."""
    error_id: Optional[str] = None
