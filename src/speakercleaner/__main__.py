"""Console entrypoint for the speaker cleaner.

Delegates to :mod:`speakercleaner.cli` so that ``python -m speakercleaner``
and the installed ``speakercleaner`` console script run the same code.
"""

from __future__ import annotations

from speakercleaner.cli import main as cli_main


def main() -> None:
    """Application entrypoint (delegates to :func:`speakercleaner.cli.main`)."""
    cli_main()


if __name__ == "__main__":
    main()
