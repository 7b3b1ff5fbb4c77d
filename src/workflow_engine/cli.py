"""Console entrypoint.

The CLI is implemented in `workflow_engine.engine.main`.
"""

from __future__ import annotations

from workflow_engine.engine.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
