"""Module entrypoint for running shimwalk as ``python -m shimwalk``."""

from __future__ import annotations

from shimwalk.cli import main


if __name__ == "__main__":
    main()
