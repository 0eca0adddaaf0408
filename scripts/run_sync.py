#!/usr/bin/env python3
"""Run the residency sync job locally or from cron.

Usage:
    python scripts/run_sync.py

Crontab (daily at 21:00 UTC):
    0 21 * * * cd /srv/residency-board && .venv/bin/python scripts/run_sync.py

Exits 0 on success, 1 on failure (including a missing SOFTR_JWT_TOKEN).
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from residency_board.db.session import SessionLocal
from residency_board.ingestion.sync import run_sync


def main() -> int:
    db = SessionLocal()
    try:
        result = run_sync(db)
        print(
            f"status={result['status']} "
            f"job_run_id={result['job_run_id']} "
            f"synced={result['synced']} "
            f"fetched={result['fetched']} "
            f"endpoints_failed={result['endpoints_failed']}"
        )
        if result.get("error"):
            print(f"error={result['error']}", file=sys.stderr)
        return 0 if result["status"] == "completed" else 1
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
