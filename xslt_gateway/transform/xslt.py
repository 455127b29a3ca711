"""
XSLT Style Sheets
=================

Loading, lookup and application of XSLT style sheets. Applying a style sheet
never raises for bad input documents; it returns an ApplyResult that either
holds the rendered output or the failure that prevented it.
"""

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from lxml import etree

from xslt_gateway.errors import Failure, StyleSheetLoadError

logger = logging.getLogger(__name__)

XSL_NAMESPACE = "http://www.w3.org/1999/XSL/Transform"
STYLESHEET_SUFFIX = ".xslt"

MEDIA_TYPES_BY_METHOD = {
    "html": "text/html",
    "xhtml": "application/xhtml+xml",
    "xml": "application/xml",
    "text": "text/plain",
}
DEFAULT_MEDIA_TYPE = "text/html"


def read_stylesheet(xslt_path: Path) -> etree._ElementTree:
    """
    Parse an XSLT stylesheet file without compiling it.

    Args:
        xslt_path: Path to the XSLT stylesheet file

    Returns:
        Parsed style sheet document

    Raises:
        FileNotFoundError: If XSLT file doesn't exist
        StyleSheetLoadError: If the file is not well-formed XML
    """
    if not xslt_path.exists():
        raise FileNotFoundError(f"XSLT stylesheet not found: {xslt_path}")

    logger.info(f"Loading XSLT stylesheet: {xslt_path}")
    try:
        return etree.parse(str(xslt_path))
    except etree.XMLSyntaxError as e:
        raise StyleSheetLoadError(f"Style sheet '{xslt_path}' could not be loaded: {e}") from e


def compile_stylesheet(xslt_doc: etree._ElementTree, xslt_path: Path) -> etree.XSLT:
    """Compile a parsed style sheet. Raises StyleSheetLoadError if it is not valid XSLT."""
    try:
        return etree.XSLT(xslt_doc)
    except etree.XSLTParseError as e:
        raise StyleSheetLoadError(f"Style sheet '{xslt_path}' could not be loaded: {e}") from e


def output_media_type(xslt_doc: Union[etree._ElementTree, etree._Element]) -> str:
    """
    Work out the content type a style sheet produces from its xsl:output.

    Args:
        xslt_doc: Parsed style sheet document

    Returns:
        The media-type attribute if present, else a type derived from the
        output method, else text/html
    """
    root = xslt_doc.getroot() if isinstance(xslt_doc, etree._ElementTree) else xslt_doc
    output = root.find(f"{{{XSL_NAMESPACE}}}output")
    if output is None:
        return DEFAULT_MEDIA_TYPE
    media_type = output.get("media-type")
    if media_type:
        return media_type
    method = (output.get("method") or "").strip().lower()
    return MEDIA_TYPES_BY_METHOD.get(method, DEFAULT_MEDIA_TYPE)


def parse_document(data: bytes) -> etree._ElementTree:
    """
    Parse an upstream XML document.

    Entities are not resolved and the parser never touches the network.

    Raises:
        etree.XMLSyntaxError: If the document is not well-formed
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.parse(io.BytesIO(data), parser)


@dataclass(frozen=True)
class ApplyResult:
    """
    Outcome of applying a style sheet.

    Attributes:
        output: Rendered output on success
        failure: Why the document could not be rendered
    """
    output: Optional[str] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class StyleSheet:
    """
    A compiled style sheet bound to its name.

    Example:
        sheet = StyleSheet.load("catalog", Path("catalog.xslt"))
        result = sheet.apply(b"<catalog/>")
        if result.ok:
            print(result.output)
    """

    def __init__(self, name: str, path: Path, transform: etree.XSLT, media_type: str = DEFAULT_MEDIA_TYPE):
        self.name = name
        self.path = path
        self.media_type = media_type
        self._transform = transform

    @classmethod
    def load(cls, name: str, path: Path) -> 'StyleSheet':
        """Compile the style sheet at path."""
        xslt_doc = read_stylesheet(path)
        transform = compile_stylesheet(xslt_doc, path)
        media_type = output_media_type(xslt_doc)
        logger.info(f"XSLT stylesheet '{name}' loaded ({media_type})")
        return cls(name, path, transform, media_type)

    def apply(self, document: bytes, **params) -> ApplyResult:
        """
        Apply this style sheet to an XML document.

        Args:
            document: Raw XML bytes
            **params: XSLT parameters, passed as string parameters

        Returns:
            ApplyResult with the rendered output, or a DOCUMENT failure when
            the document is not well-formed or the style sheet rejects it
        """
        try:
            xml_doc = parse_document(document)
        except etree.XMLSyntaxError as e:
            logger.debug(f"Document parse failed for '{self.name}'", exc_info=True)
            return ApplyResult(failure=Failure.document(type(e).__name__, str(e)))

        xslt_params = {k: etree.XSLT.strparam(str(v)) for k, v in params.items()}

        logger.info(f"Applying XSLT transformation '{self.name}'...")
        try:
            result = self._transform(xml_doc, **xslt_params)
        except etree.XSLTApplyError as e:
            logger.error(f"XSLT transformation failed: {e}")
            logger.error(f"Error log: {self._transform.error_log}")
            return ApplyResult(failure=Failure.document(type(e).__name__, str(e)))

        # Check for transformation warnings
        if self._transform.error_log:
            logger.warning("XSLT transformation completed with warnings:")
            for entry in self._transform.error_log:
                logger.warning(f"  {entry}")

        return ApplyResult(output=str(result))

    def __repr__(self) -> str:
        return f"StyleSheet(name={self.name!r}, path={str(self.path)!r})"


class StyleSheetLibrary:
    """
    Resolves transformer names to style sheet files.

    A transformer named X lives at <base_dir>/X.xslt. Names are matched
    exactly; names that would escape base_dir never resolve.
    """

    def __init__(self, base_dir: Union[str, Path] = "."):
        self.base_dir = Path(base_dir)

    def path(self, name: str) -> Path:
        """Return the expected absolute path of a style sheet."""
        return (self.base_dir / f"{name}{STYLESHEET_SUFFIX}").expanduser().resolve()

    def exists(self, name: str) -> bool:
        """Check whether a style sheet with this name is present."""
        if not self.is_valid_name(name):
            return False
        return self.path(name).is_file()

    def load(self, name: str) -> StyleSheet:
        """
        Load a style sheet by name.

        Raises:
            FileNotFoundError: If the style sheet does not exist
            StyleSheetLoadError: If the style sheet is malformed
        """
        if not self.exists(name):
            raise FileNotFoundError(f"XSLT stylesheet not found: {self.path(name)}")
        return StyleSheet.load(name, self.path(name))

    def names(self) -> List[str]:
        """Return the names of all available style sheets, sorted."""
        base = self.base_dir.expanduser()
        if not base.is_dir():
            return []
        return sorted(
            p.stem for p in base.glob(f"*{STYLESHEET_SUFFIX}")
            if p.is_file() and self.is_valid_name(p.stem)
        )

    @staticmethod
    def is_valid_name(name: str) -> bool:
        if not name or name.startswith("."):
            return False
        return "/" not in name and "\\" not in name and "\x00" not in name
