#!/usr/bin/env python3
"""
Check that the app imports cleanly (same chain as tests/conftest.py).
Run before pushing to catch ModuleNotFoundError / ImportError.

From repo root:
  python scripts/check_imports.py
  pytest tests/ --collect-only -q   # alternative: collect tests (loads conftest)
"""
import os
import sys

# Ensure repo root is on path (when run as python scripts/check_imports.py)
_repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)

# Same env as tests/conftest.py so app.main and its deps load
os.environ.setdefault("APP_ENV", "dev")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("EMAIL_DRY_RUN", "true")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")


def main() -> int:
    try:
        from app.main import app  # noqa: F401
        from app.services.quote import compute_quote

        compute_quote({"services": ["website"]})
        print("OK: app.main imports and the quote engine runs.")
        return 0
    except Exception as e:
        print("FAIL: Import error:", file=sys.stderr)
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
