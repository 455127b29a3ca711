#!/usr/bin/env python3
"""
XSLT Gateway command line

Usage:
    python -m xslt_gateway.cli transform catalog http://example.com/catalog.xml
    python -m xslt_gateway.cli list
    python -m xslt_gateway.cli serve --port 8000

Exit codes:
    0 - success
    1 - the transformation recorded a problem
    2 - configuration error (missing or malformed style sheet, bad config)
    3 - unexpected error
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from xslt_gateway import __version__
from xslt_gateway.config import (
    config_from_env,
    configure_logging,
    load_config,
    set_config,
)
from xslt_gateway.errors import ConfigurationError, report_exception
from xslt_gateway.problems import summarize
from xslt_gateway.transform import StyleSheetLibrary, Transformer

logger = logging.getLogger("xslt_gateway")

EXIT_OK = 0
EXIT_PROBLEM = 1
EXIT_CONFIG = 2
EXIT_UNEXPECTED = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xslt-gateway",
        description="Render remote XML documents through local XSLT style sheets.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="JSON or YAML configuration file")
    parser.add_argument("--stylesheet-dir", help="Directory holding <name>.xslt files")
    parser.add_argument("--log-level", help="Logging level (default: from configuration)")

    sub = parser.add_subparsers(dest="command", required=True)

    transform = sub.add_parser("transform", help="Render one URL through a style sheet")
    transform.add_argument("name", help="Transformer (style sheet) name")
    transform.add_argument("url", help="URL of the XML document")
    transform.add_argument("--output", "-o", type=Path, help="Write output to this file")

    sub.add_parser("list", help="List available transformers")

    serve = sub.add_parser("serve", help="Run the HTTP gateway")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def cmd_transform(args, library: StyleSheetLibrary) -> int:
    transformer = Transformer.get(args.name, library=library)
    output = transformer.transform(args.url)
    if transformer.has_problems():
        print(summarize(transformer.problems), file=sys.stderr)
        return EXIT_PROBLEM

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
        logger.info(f"Output written to: {args.output}")
    else:
        sys.stdout.write(output)
    return EXIT_OK


def cmd_list(args, library: StyleSheetLibrary) -> int:
    for name in library.names():
        print(name)
    return EXIT_OK


def cmd_serve(args, library: StyleSheetLibrary) -> int:
    import uvicorn
    from api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return EXIT_OK


COMMANDS = {
    "transform": cmd_transform,
    "list": cmd_list,
    "serve": cmd_serve,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else config_from_env()
        overrides = {}
        if args.stylesheet_dir:
            overrides["stylesheet_dir"] = args.stylesheet_dir
        if args.log_level:
            overrides["log_level"] = args.log_level
        if overrides:
            config = replace(config, **overrides)
    except (OSError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    set_config(config)
    configure_logging(config.log_level)
    library = StyleSheetLibrary(config.stylesheet_path)

    try:
        return COMMANDS[args.command](args, library)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG
    except Exception as e:
        print(report_exception(e, logger), file=sys.stderr)
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())
