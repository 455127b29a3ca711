"""
Shared fixtures for the gateway tests.
"""

from pathlib import Path
from types import SimpleNamespace
from typing import List, Optional, Tuple

import pytest
import requests

from xslt_gateway.config import set_config
from xslt_gateway.errors import FetchError
from xslt_gateway.fetch import FetchClient, FetchResponse
from xslt_gateway.transform import StyleSheetLibrary
from xslt_gateway.validation import Credentials


CATALOG_XSLT = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="html" encoding="UTF-8"/>
  <xsl:template match="/">
    <xsl:if test="not(catalog)">
      <xsl:message terminate="yes">Expected a catalog document</xsl:message>
    </xsl:if>
    <html><body><ul>
      <xsl:for-each select="catalog/book">
        <li><xsl:value-of select="title"/></li>
      </xsl:for-each>
    </ul></body></html>
  </xsl:template>
</xsl:stylesheet>
"""

TITLES_XSLT = """<?xml version="1.0" encoding="UTF-8"?>
<xsl:stylesheet version="1.0" xmlns:xsl="http://www.w3.org/1999/XSL/Transform">
  <xsl:output method="text"/>
  <xsl:template match="/">
    <xsl:for-each select="//title">
      <xsl:value-of select="."/>
      <xsl:text>&#10;</xsl:text>
    </xsl:for-each>
  </xsl:template>
</xsl:stylesheet>
"""

BROKEN_XSLT = "<xsl:stylesheet version='1.0' xmlns:xsl='http://www.w3.org/1999/XSL/Transform'>"

CATALOG_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<catalog>
  <book><title>Dune</title></book>
  <book><title>Solaris</title></book>
</catalog>
"""


class FakeFetchClient(FetchClient):
    """Fetch client double returning a canned response or raising."""

    def __init__(self,
                 status_code: int = 200,
                 reason: str = "OK",
                 body: bytes = CATALOG_XML,
                 error: Optional[Exception] = None):
        self.response = FetchResponse(status_code=status_code, reason=reason, body=body)
        self.error = error
        self.calls: List[Tuple[str, Optional[Credentials]]] = []

    def get(self, uri, credentials=None):
        self.calls.append((uri, credentials))
        if self.error is not None:
            raise self.error
        return self.response


class FakeSession:
    """requests.Session double recording the keyword arguments of get()."""

    def __init__(self, status_code=200, reason="OK", content=b"<doc/>", error=None):
        self.status_code = status_code
        self.reason = reason
        self.content = content
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            status_code=self.status_code,
            reason=self.reason,
            content=self.content,
        )

    def close(self):
        self.closed = True


def transport_error(message: str = "Name or service not known") -> FetchError:
    """A FetchError caused by a requests connection failure."""
    try:
        raise requests.exceptions.ConnectionError(message)
    except requests.exceptions.ConnectionError as e:
        error = FetchError(str(e))
        error.__cause__ = e
        return error


@pytest.fixture(autouse=True)
def reset_config():
    """Make every test start from the environment configuration."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def stylesheet_dir(tmp_path) -> Path:
    """Directory with catalog, titles and broken style sheets."""
    directory = tmp_path / "xslt"
    directory.mkdir()
    (directory / "catalog.xslt").write_text(CATALOG_XSLT, encoding="utf-8")
    (directory / "titles.xslt").write_text(TITLES_XSLT, encoding="utf-8")
    (directory / "broken.xslt").write_text(BROKEN_XSLT, encoding="utf-8")
    return directory


@pytest.fixture
def library(stylesheet_dir) -> StyleSheetLibrary:
    return StyleSheetLibrary(stylesheet_dir)


@pytest.fixture
def fetch_client() -> FakeFetchClient:
    return FakeFetchClient()
