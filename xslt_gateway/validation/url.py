"""
URL Validation
==============

Parses the target URL handed to a transformer and rejects anything the
fetch step could not use: a URL needs a scheme, a host, a port (explicit or
the scheme default) and a request URI.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional
from urllib.parse import unquote, urlsplit
import logging
import re

from xslt_gateway.problems import Problem, ProblemCode

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

# Unescaped whitespace, control characters and a few delimiters that are never
# legal in a URI.
_ILLEGAL_CHARS = re.compile(r'[\s\x00-\x1f\x7f<>"{}|\\^`]')


class Credentials(NamedTuple):
    """Basic-auth credentials taken from URL user-info."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class ParsedUrl:
    """
    A validated target URL.

    Attributes:
        raw: The URL exactly as supplied, used for the GET
        scheme: Lower-cased scheme
        host: Host name or address
        port: Explicit port or the scheme default
        request_uri: Path plus query, "/" when the path is empty
        credentials: Basic-auth credentials, if both parts were given
    """
    raw: str
    scheme: str
    host: str
    port: int
    request_uri: str
    credentials: Optional[Credentials] = None

    @property
    def redacted(self) -> str:
        """The URL with any user-info masked, for logging."""
        parts = urlsplit(self.raw)
        if "@" not in parts.netloc:
            return self.raw
        netloc = "***@" + parts.netloc.rsplit("@", 1)[1]
        return parts._replace(netloc=netloc).geturl()


@dataclass(frozen=True)
class UrlValidationResult:
    """Either a parsed URL or the problem explaining why there is none."""

    url: Optional[ParsedUrl] = None
    problem: Optional[Problem] = None

    @property
    def is_valid(self) -> bool:
        return self.url is not None


def invalid_url_problem(raw: str) -> Problem:
    return Problem(ProblemCode.BAD_CLIENT_REQUEST, f"URI '{raw}' is not valid.")


class UrlValidator:
    """
    Validates target URLs.

    Example:
        result = UrlValidator().validate("http://example.com/feed.xml")
        if result.is_valid:
            print(result.url.request_uri)  # /feed.xml
    """

    def __init__(self, default_ports: dict = None):
        self.default_ports = dict(DEFAULT_PORTS if default_ports is None else default_ports)

    def validate(self, raw: str) -> UrlValidationResult:
        """
        Parse and validate a URL string.

        Args:
            raw: URL as supplied by the client

        Returns:
            UrlValidationResult holding a ParsedUrl, or a BAD_CLIENT_REQUEST problem
        """
        parsed = self.parse(raw)
        if parsed is None:
            return UrlValidationResult(problem=invalid_url_problem(raw))
        return UrlValidationResult(url=parsed)

    def parse(self, raw: str) -> Optional[ParsedUrl]:
        """Return a ParsedUrl, or None when any required part is missing."""
        if not raw or _ILLEGAL_CHARS.search(raw):
            return None

        try:
            parts = urlsplit(raw)
            explicit_port = parts.port
        except ValueError as e:
            logger.debug(f"Unparseable URI {raw!r}: {e}")
            return None

        scheme = parts.scheme.lower()
        if scheme not in self.default_ports:
            return None

        host = parts.hostname
        if not host:
            return None

        port = explicit_port if explicit_port is not None else self.default_ports[scheme]
        if not port:
            return None

        request_uri = parts.path or "/"
        if not request_uri.startswith("/"):
            return None
        if parts.query:
            request_uri = f"{request_uri}?{parts.query}"

        credentials = None
        if parts.username and parts.password:
            credentials = Credentials(unquote(parts.username), unquote(parts.password))

        return ParsedUrl(
            raw=raw,
            scheme=scheme,
            host=host,
            port=port,
            request_uri=request_uri,
            credentials=credentials,
        )


def validate_url(raw: str) -> UrlValidationResult:
    """Validate a URL with the default validator."""
    return UrlValidator().validate(raw)
