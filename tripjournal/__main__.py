"""Module entry point: python -m tripjournal ..."""

from __future__ import annotations

from tripjournal.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
