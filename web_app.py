"""HTTP server for listing and streaming files from a data directory."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from aiohttp import web
from colorama import Fore, Style, init as colorama_init

from filestream.api import create_app
from filestream.common.logging import setup_logging
from filestream.config import Config, load_config
from filestream.utils import ConfigError


def _print_banner(config: Config) -> None:
    base_url = f"http://localhost:{config.port}"
    print(f"{Fore.CYAN}Server starting at {base_url}{Style.RESET_ALL}")
    print(f"- Frontend: {base_url}")
    print(f"- API: {base_url}/api")
    print(f"- Data root: {config.data_root}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="File listing and streaming server")
    parser.add_argument("--host", help="Host to bind")
    parser.add_argument("--port", type=int, help="Port to bind")
    parser.add_argument("--data-root", type=Path, help="Directory to serve files from")
    parser.add_argument("--frontend-dir", type=Path, help="Static frontend directory")
    parser.add_argument("--env-file", type=Path, help="Path to a .env file")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """
    Load configuration and apply command line overrides.

    Args:
        args: Parsed command line arguments.

    Returns:
        Config instance.
    """
    config = load_config(args.env_file)
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        if not 0 < args.port < 65536:
            raise ConfigError("Port must be between 1 and 65535.")
        overrides["port"] = args.port
    if args.data_root:
        overrides["data_root"] = args.data_root.expanduser().resolve()
    if args.frontend_dir:
        overrides["frontend_dir"] = args.frontend_dir.expanduser().resolve()
    return dataclasses.replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> None:
    colorama_init()
    try:
        config = build_config(parse_args(argv))
    except ConfigError as exc:
        print(f"{Fore.RED}Configuration error:{Style.RESET_ALL} {exc}")
        sys.exit(1)

    setup_logging(config.log_level)
    _print_banner(config)
    app = create_app(config)
    web.run_app(app, host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
