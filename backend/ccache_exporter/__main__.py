"""Command line entry point.

Usage:
    python -m ccache_exporter --ccache-dir ~/.cache/ccache
    python -m ccache_exporter --listen-address 127.0.0.1:9508 --ccache-size 5G

Flags override the CCACHE_EXPORTER_* / CCACHE_DIR / CCACHE_MAXSIZE
environment variables.
"""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path

from pydantic import ByteSize

from ccache_exporter import __version__
from ccache_exporter.config import settings
from ccache_exporter.utils.sizes import parse_size

logger = logging.getLogger("ccache_exporter")

DEFAULT_LISTEN_ADDRESS = ":9508"


def parse_listen_address(value: str) -> tuple[str, int]:
    """Split "host:port"; an empty host means all interfaces."""
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {value!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def _listen_address(value: str) -> tuple[str, int]:
    try:
        return parse_listen_address(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _size(value: str) -> int:
    try:
        return parse_size(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ccache-exporter",
        description="Export ccache statistics as Prometheus metrics",
    )
    parser.add_argument(
        "--listen-address",
        type=_listen_address,
        default=None,
        help=f"The address to listen on for HTTP requests (default: {DEFAULT_LISTEN_ADDRESS})",
    )
    parser.add_argument(
        "--ccache-dir",
        type=Path,
        default=None,
        help="Path to the ccache directory (default: $CCACHE_DIR)",
    )
    parser.add_argument(
        "--ccache-size",
        type=_size,
        default=None,
        help=(
            "The configured ccache size (default: $CCACHE_MAXSIZE). k/M/G/T and kB/MB/GB "
            "are decimal (5G = 5*10^9 bytes, as in ccache's max_size); use KiB/MiB/GiB "
            "for powers of 1024"
        ),
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Log level (default: {settings.log_level})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def apply_args(args: argparse.Namespace) -> None:
    """Copy given flags into settings and the environment (for reload workers)."""
    if args.listen_address is not None:
        settings.host, settings.port = args.listen_address
        os.environ["CCACHE_EXPORTER_HOST"] = settings.host
        os.environ["CCACHE_EXPORTER_PORT"] = str(settings.port)
    if args.ccache_dir is not None:
        settings.ccache_dir = str(args.ccache_dir.expanduser())
        os.environ["CCACHE_EXPORTER_CCACHE_DIR"] = settings.ccache_dir
    if args.ccache_size is not None:
        settings.ccache_maxsize = ByteSize(args.ccache_size)
        os.environ["CCACHE_EXPORTER_CCACHE_MAXSIZE"] = str(args.ccache_size)
    if args.log_level is not None:
        settings.log_level = args.log_level
        os.environ["CCACHE_EXPORTER_LOG_LEVEL"] = args.log_level


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    apply_args(args)

    if not settings.ccache_dir:
        logging.basicConfig(level=logging.ERROR)
        logger.error("--ccache-dir flag or CCACHE_DIR environment variable required")
        return 1

    from ccache_exporter.main import run

    run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
