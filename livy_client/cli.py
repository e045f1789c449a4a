# All comments are in English.
from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence

import yaml

from livy_client.builder import LIVY_URI_KEY, LivyClientBuilder
from livy_client.errors import InvalidURIError
from livy_client.redact import redacted_str
from livy_client.registry import get_registry
from livy_client.uri import parse_uri

logger = logging.getLogger("livy_client.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="livy-client-conf",
        description="Show the effective Livy client configuration and registered client factories.",
    )
    parser.add_argument("--no-defaults", action="store_true", help="Do not read spark-defaults.conf / livy-client.conf.")
    parser.add_argument(
        "--conf-dir",
        action="append",
        default=None,
        help="Directory to search for default config files (repeatable, first match wins).",
    )
    parser.add_argument("--list-factories", action="store_true", help="Print registered client factories in precedence order.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "overrides",
        nargs="*",
        help="Optional KEY=VALUE overrides, e.g. livy.uri=http://localhost:8998 livy.sessionId=3",
    )
    return parser


def _split_overrides(parser: argparse.ArgumentParser, overrides: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in overrides:
        key, sep, value = item.partition("=")
        if not sep or not key:
            parser.error(f"override must look like KEY=VALUE: {item!r}")
        out[key] = value
    return out


def _printable_conf(conf) -> Dict[str, str]:
    out = dict(conf)
    if LIVY_URI_KEY in out:
        try:
            out[LIVY_URI_KEY] = redacted_str(parse_uri(out[LIVY_URI_KEY]))
        except InvalidURIError:
            out[LIVY_URI_KEY] = "<invalid URI>"
    return out


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides = _split_overrides(parser, args.overrides)
    logger.debug("Applying %d command-line overrides", len(overrides))
    builder = LivyClientBuilder(load_defaults=not args.no_defaults, search_path=args.conf_dir)
    builder.set_all(overrides)

    print("=== Effective Config ===")
    print(yaml.safe_dump(_printable_conf(builder.conf), sort_keys=False, default_flow_style=False), end="")

    if args.list_factories:
        registry = get_registry()
        print("=== Client Factories ===")
        for idx, factory in enumerate(registry.factories(), start=1):
            print(f"{idx}. {type(factory).__module__}.{type(factory).__qualname__}")
        for label, reason in registry.failed().items():
            print(f"FAILED {label}: {reason}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
