"""Exceptions for the short URL service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """Client input failed validation checks."""
    pass


class InvalidURLError(URLValidationError):
    """The submitted URL is malformed, too long or not resolvable."""
    pass


class InvalidShortIdError(URLValidationError):
    """The requested short identifier is not a usable integer."""
    pass


class URLCreationError(URLError):
    """The store failed while looking up or saving a URL."""
    pass


class URLLookupError(URLError):
    """The store failed while resolving a short identifier."""
    pass
