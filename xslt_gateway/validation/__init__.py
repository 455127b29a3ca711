"""
Validation
==========

Validation of client input before any upstream request is made.

Components:
- UrlValidator: Parses and validates target URLs
- ParsedUrl: A validated target URL
- UrlValidationResult: Container for validation results
- Credentials: Basic-auth credentials taken from URL user-info
"""

from xslt_gateway.validation.url import (
    Credentials,
    ParsedUrl,
    UrlValidationResult,
    UrlValidator,
    validate_url,
)

__all__ = [
    "Credentials",
    "ParsedUrl",
    "UrlValidationResult",
    "UrlValidator",
    "validate_url",
]
