"""Recompute used vacation days / permission hours from approved requests.

Repair tool for balances that drifted (manual edits, imports). Usage:

    python scripts/recalculate_balances.py 2025            # every employee
    python scripts/recalculate_balances.py 2025 --user 12  # one employee
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "leave_attendance"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from leave_attendance.container import build_container

logger = logging.getLogger("recalculate_balances")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("year", type=int)
    parser.add_argument("--user", type=int, default=None, help="only this user id")
    args = parser.parse_args(argv)

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), format="%(levelname)s %(message)s")
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        full_day_permission_hours=float(getattr(settings, "FULL_DAY_PERMISSION_HOURS", 8.0)),
    )

    balances = container.balances_repo.list(user_id=args.user, year=args.year)
    for balance in balances:
        container.balance_reconciler.recalculate(balance.user_id, args.year)
    logger.info("Recalculated %d balance(s) for %s", len(balances), args.year)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
