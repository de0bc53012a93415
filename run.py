"""Delve CLI entry point.

Provides subcommands for running the level API server and for generating a
single level to stdout. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve Level Generator

    Run the level API server or generate a single level layout. Configuration
    can be provided via CLI flags or environment variables. If both are
    present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST              Bind address for the web server (default: 0.0.0.0)
          PORT              Port for the web server (default: 5000)
          MAPGEN_WIDTH      Default level width (width-1 must be a multiple of 5)
          MAPGEN_HEIGHT     Default level height (height-1 must be a multiple of 5)
          MAPGEN_SEED       Default PRNG table index (0-255)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a small seeded level
          python run.py generate --width 51 --height 31 --seed 7

          # Same level as JSON (rows, doors, metrics)
          python run.py generate --width 51 --height 31 --seed 7 --json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve Level Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the level API web server",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one level and print it",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen_parser.add_argument("--width", type=int, default=None, help="Level width (default: env MAPGEN_WIDTH or 151)")
    gen_parser.add_argument("--height", type=int, default=None, help="Level height (default: env MAPGEN_HEIGHT or 151)")
    gen_parser.add_argument("--seed", type=int, default=None, help="PRNG table index 0-255 (default: shared stream)")
    gen_parser.add_argument("--json", action="store_true", help="Emit JSON instead of ASCII rows")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    return parser.parse_args(argv)


def _run_generate(args: argparse.Namespace) -> int:
    from delve.mapgen import MapGenConfigError, MapGenSettings, generate_from_settings
    from delve.mapgen.random_table import initialize

    try:
        settings = MapGenSettings.from_env(width=args.width, height=args.height, seed=args.seed).validate()
    except MapGenConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2
    if settings.seed is None:
        initialize()
    board = generate_from_settings(settings).result()
    if args.json:
        print(json.dumps({"seed": settings.seed, **board.to_dict(), "metrics": board.metrics}))
    else:
        print("\n".join(board.to_rows()))
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from delve.logging_utils import log
    from delve.server import start_server

    title = f"{Fore.CYAN}{Style.BRIGHT}Delve Level Server{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve Level Server"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Version:'):12} {value(__version__)}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="startup", mode=mode, host=host, port=port)

    start_server(host=host, port=port, debug=bool(getattr(args, "debug", False)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
