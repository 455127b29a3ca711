"""
Fetching
========

Upstream document retrieval.

Components:
- FetchClient: Abstract interface for fetch clients
- HttpFetchClient: requests-based implementation
- FetchResponse: Status line and body of an upstream response
"""

from xslt_gateway.fetch.http import (
    FetchClient,
    FetchResponse,
    HttpFetchClient,
)

__all__ = [
    "FetchClient",
    "FetchResponse",
    "HttpFetchClient",
]
