"""
HTTP Fetching
=============

Retrieves upstream XML documents. The FetchClient interface keeps the
transformer independent of the transport; HttpFetchClient implements it with
an injected requests.Session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union
import logging

import requests
from requests.auth import HTTPBasicAuth

from xslt_gateway.errors import FetchError
from xslt_gateway.validation.url import Credentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResponse:
    """Status line and body of an upstream response."""

    status_code: int
    reason: str
    body: bytes

    @property
    def ok(self) -> bool:
        """Only 200 counts as a usable upstream response."""
        return self.status_code == 200


class FetchClient(ABC):
    """Interface for retrieving upstream documents."""

    @abstractmethod
    def get(self, uri: str, credentials: Optional[Credentials] = None) -> FetchResponse:
        """
        Perform a GET request.

        Args:
            uri: Absolute URI to fetch
            credentials: Optional basic-auth credentials for this request only

        Returns:
            FetchResponse for any HTTP status

        Raises:
            FetchError: If no HTTP response could be obtained
        """


class HttpFetchClient(FetchClient):
    """
    Fetches documents over HTTP(S) with requests.

    The session is shared for connection reuse; credentials are passed with
    each request and never stored on the session. Redirects are not followed:
    a 3xx is returned to the caller like any other status.

    Example:
        client = HttpFetchClient(timeout=10)
        response = client.get("https://example.com/feed.xml")
    """

    def __init__(self,
                 session: requests.Session = None,
                 timeout: Optional[float] = 30.0,
                 verify: Union[bool, str] = True,
                 user_agent: Optional[str] = None):
        """
        Initialize client.

        Args:
            session: Session to use (a new one is created when omitted)
            timeout: Connect/read timeout in seconds, None for no timeout
            verify: TLS verification flag or CA bundle path
            user_agent: Optional User-Agent header for all requests
        """
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.verify = verify
        self.headers = {"User-Agent": user_agent} if user_agent else {}

    def get(self, uri: str, credentials: Optional[Credentials] = None) -> FetchResponse:
        auth = HTTPBasicAuth(credentials.username, credentials.password) if credentials else None
        try:
            response = self.session.get(
                uri,
                auth=auth,
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify,
                allow_redirects=False,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(str(e)) from e

        logger.debug(f"Upstream answered {response.status_code} {response.reason}")
        return FetchResponse(
            status_code=response.status_code,
            reason=response.reason or "",
            body=response.content,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> 'HttpFetchClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
