"""Allow ``python -m kadnode``."""

from __future__ import annotations

from kadnode.cli.main import main

if __name__ == "__main__":
    main()
