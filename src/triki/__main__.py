"""Entry point for running Triki via ``python -m triki``."""

from __future__ import annotations

import argparse
import logging
import os

import uvicorn

from .console import ConsoleApp


def main() -> None:
    """Start the web board, or the console loop with ``--console``."""

    parser = argparse.ArgumentParser(prog="triki", description="Play Triki")
    parser.add_argument(
        "--console", action="store_true", help="play in the terminal instead"
    )
    args = parser.parse_args()

    logging.basicConfig(level=os.environ.get("TRIKI_LOG_LEVEL", "WARNING").upper())

    if args.console:
        ConsoleApp().run()
        return

    host = os.environ.get("TRIKI_HOST", "127.0.0.1")
    port = int(os.environ.get("TRIKI_PORT", "8000"))
    uvicorn.run("triki.ui:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
