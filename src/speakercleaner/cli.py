"""Command-line interface for the speaker cleaner.

Both the ``speakercleaner`` console script and ``python -m speakercleaner``
end up in :func:`main`.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from pydantic import ValidationError

from speakercleaner import __version__
from speakercleaner.app import cleaner
from speakercleaner.config import RuntimeConfig, make_runtime_config
from speakercleaner.logging_config import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Return parsed arguments using the app's parser helper."""
    return cleaner.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Synchronous entrypoint for the speaker cleaner CLI."""
    args = parse_args(argv)

    if args.version:
        print(f"Speaker Cleaner {__version__}")
        return

    try:
        rc = make_runtime_config(args=args)
    except ValidationError as e:
        print(f"invalid configuration:\n{e}", file=sys.stderr)
        raise SystemExit(2) from None
    configure_logging(rc.settings.log_level_no)

    try:
        asyncio.run(run_async(argv, rc=rc))
    except KeyboardInterrupt:
        # Allow graceful cancellation via Ctrl+C
        pass


async def run_async(
    argv: list[str] | None = None, *, rc: RuntimeConfig | None = None
) -> None:
    """Async entrypoint for programmatic usage/testing.

    Tests and programmatic callers can `await run_async(...)` to run the
    application without starting a nested event loop.
    """
    args = parse_args(argv)
    if args.version:
        print(f"Speaker Cleaner {__version__}")
        return

    rc = rc or make_runtime_config(args=args)
    if args.headless:
        await cleaner._main_headless_async(args)
    else:
        await cleaner.main_async(args, rc=rc)


if __name__ == "__main__":
    main()
