"""Rebuild daily head counts from the scan ledger.

Run after a crash or a manual edit of scan_records; a clean database is left untouched.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from mess_system.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container({k: getattr(settings, k) for k in dir(settings) if k.isupper()})

    if container.aggregator.reconcile():
        print("OK: head counts rebuilt from scan_records")
    else:
        print("OK: head counts already match scan_records")


if __name__ == "__main__":
    main()
