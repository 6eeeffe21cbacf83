"""Local runner for facevitals with src/ layout.

Usage: uv run python run_app.py VIDEO [--out DIR]
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    # Ensure src/ is on sys.path so `import facevitals` resolves
    root = Path(__file__).resolve().parent
    src = root / "src"
    if src.exists():
        sys.path.insert(0, str(src))
    from facevitals.app import main as app_main  # type: ignore

    sys.exit(app_main())


if __name__ == "__main__":
    main()
