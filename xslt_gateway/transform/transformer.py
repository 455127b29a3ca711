"""
Transformer
===========

The Transformer uses a local XSLT style sheet to transform a remote XML
document. It validates the target URL, fetches the document, checks the
upstream response and renders the document, recording a Problem for every
anticipated failure instead of raising.
"""

import logging
from typing import Optional, Tuple

from xslt_gateway.config.settings import get_config
from xslt_gateway.errors import (
    Failure,
    FetchError,
    TransformerNotFoundError,
    describe_failure,
)
from xslt_gateway.fetch.http import FetchClient, HttpFetchClient
from xslt_gateway.problems import Problem, ProblemCode, ProblemLog
from xslt_gateway.transform.xslt import StyleSheet, StyleSheetLibrary
from xslt_gateway.validation.url import ParsedUrl, UrlValidator

logger = logging.getLogger(__name__)


def default_library() -> StyleSheetLibrary:
    return StyleSheetLibrary(get_config().stylesheet_path)


def default_fetch_client() -> FetchClient:
    config = get_config()
    return HttpFetchClient(
        timeout=config.fetch_timeout,
        verify=config.verify_tls,
        user_agent=config.user_agent,
    )


class Transformer:
    """
    Fetch-and-render pipeline bound to one style sheet.

    Example:
        transformer = Transformer.get("catalog")
        html = transformer.transform("http://example.com/catalog.xml")
        if transformer.has_problems():
            print(transformer.problems[0].message)
    """

    BAD_CLIENT_REQUEST = ProblemCode.BAD_CLIENT_REQUEST
    INVALID_UPSTREAM_RESPONSE = ProblemCode.INVALID_UPSTREAM_RESPONSE

    def __init__(self,
                 name: str,
                 library: StyleSheetLibrary = None,
                 fetch_client: FetchClient = None,
                 validator: UrlValidator = None):
        """
        Initialize transformer.

        Args:
            name: Transformer name, resolved to <name>.xslt
            library: Style sheet lookup (defaults to the configured directory)
            fetch_client: Upstream client (defaults to a new HttpFetchClient)
            validator: URL validator

        Raises:
            TransformerNotFoundError: If no style sheet exists for name
            StyleSheetLoadError: If the style sheet is malformed
        """
        self._library = library if library is not None else default_library()
        if not self._library.exists(name):
            raise TransformerNotFoundError(name, self._library.path(name))

        self.name = name
        self._stylesheet: StyleSheet = self._library.load(name)
        self._fetch_client = fetch_client
        self._validator = validator or UrlValidator()
        self._problems = ProblemLog()

    @classmethod
    def get(cls, name: str, **kwargs) -> 'Transformer':
        """Return the transformer with the given name."""
        return cls(name, **kwargs)

    @staticmethod
    def exists(name: str, library: StyleSheetLibrary = None) -> bool:
        """Check if the transformer with the given name exists locally."""
        library = library if library is not None else default_library()
        return library.exists(name)

    @property
    def stylesheet(self) -> StyleSheet:
        return self._stylesheet

    @property
    def media_type(self) -> str:
        return self._stylesheet.media_type

    @property
    def problems(self) -> Tuple[Problem, ...]:
        """Problems from the most recent transform call, in order."""
        return self._problems.problems

    def has_problems(self) -> bool:
        return bool(self._problems)

    def transform(self, url: str) -> Optional[str]:
        """
        Fetch the document at url and render it.

        Args:
            url: Target URL as supplied by the client

        Returns:
            Rendered output, or None when a problem was recorded
        """
        self._problems.clear()

        result = self._validator.validate(url)
        if not result.is_valid:
            self._problems.record(result.problem.code, result.problem.message, "validate")
            return None

        document = self.fetch(result.url)
        if document is None:
            return None

        rendered = self._stylesheet.apply(document)
        if not rendered.ok:
            self._log_a_problem(self.INVALID_UPSTREAM_RESPONSE, rendered.failure, "render")
            return None
        return rendered.output

    def fetch(self, url: ParsedUrl) -> Optional[bytes]:
        """
        Fetch the upstream document.

        Returns:
            Response body, or None when a problem was recorded
        """
        client = self._fetch_client
        if client is None:
            client = self._fetch_client = default_fetch_client()

        logger.info(f"Fetching {url.redacted}")
        try:
            response = client.get(url.raw, url.credentials)
        except FetchError as e:
            logger.debug(f"Fetching {url.redacted} failed", exc_info=True)
            self._log_a_problem(self.INVALID_UPSTREAM_RESPONSE, Failure.transport(e), "fetch")
            return None

        if not response.ok:
            failure = Failure.upstream_status(response.status_code, response.reason)
            self._log_a_problem(self.INVALID_UPSTREAM_RESPONSE, failure, "fetch")
            return None
        return response.body

    def _log_a_problem(self, code: int, failure: Failure, location: str) -> Problem:
        return self._problems.record(code, describe_failure(failure), location)

    def __repr__(self) -> str:
        return f"Transformer(name={self.name!r})"
