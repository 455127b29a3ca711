"""
XSLT Gateway
============

An on-demand XML-to-HTML gateway: fetch a remote XML document and render it
through a locally stored XSLT style sheet.

Architecture
------------

    xslt_gateway/
    ├── validation/    - Target URL validation
    ├── fetch/         - Upstream document retrieval (requests)
    ├── transform/     - XSLT style sheets and the Transformer (lxml)
    ├── config/        - Configuration management
    ├── problems.py    - Classified failures recorded during a transform
    ├── errors.py      - Exception hierarchy and error reporting
    └── cli.py         - Command line interface

The HTTP surface lives in the top-level ``api`` module.

Usage
-----

    from xslt_gateway import Transformer

    transformer = Transformer.get("catalog")
    html = transformer.transform("http://example.com/catalog.xml")
    if transformer.has_problems():
        problem = transformer.problems[0]
        print(problem.code, problem.message)

"""

__version__ = "1.0.0"

from xslt_gateway.problems import (
    Problem,
    ProblemCode,
)

from xslt_gateway.errors import (
    ConfigurationError,
    FetchError,
    GatewayError,
    StyleSheetLoadError,
    TransformerNotFoundError,
)

from xslt_gateway.validation.url import (
    ParsedUrl,
    UrlValidator,
)

from xslt_gateway.fetch.http import (
    FetchClient,
    FetchResponse,
    HttpFetchClient,
)

from xslt_gateway.transform.xslt import (
    StyleSheet,
    StyleSheetLibrary,
)

from xslt_gateway.transform.transformer import (
    Transformer,
)

__all__ = [
    # Version
    "__version__",
    # Problems
    "Problem",
    "ProblemCode",
    # Errors
    "ConfigurationError",
    "FetchError",
    "GatewayError",
    "StyleSheetLoadError",
    "TransformerNotFoundError",
    # Validation
    "ParsedUrl",
    "UrlValidator",
    # Fetching
    "FetchClient",
    "FetchResponse",
    "HttpFetchClient",
    # Transform
    "StyleSheet",
    "StyleSheetLibrary",
    "Transformer",
]
