#!/usr/bin/env python3
"""
Quick checks so the booking API can start. Run from the repo root:
  python scripts/check_backend.py
"""
import os
import socket
import sys
from pathlib import Path

repo_dir = Path(__file__).resolve().parent.parent
os.chdir(repo_dir)
if str(repo_dir) not in sys.path:
    sys.path.insert(0, str(repo_dir))


def main():
    errors = []

    # 1) .env
    env_file = repo_dir / ".env"
    if not env_file.exists():
        print("WARN .env missing; using DATABASE_URL from the environment or the default")
    else:
        print("OK  .env exists")

    # 2) DB connection and schema
    try:
        from sqlalchemy import inspect, text

        from activity_booking.db.session import engine
        from activity_booking.db.tables import ALL_TABLE_NAMES

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
        missing = sorted(set(ALL_TABLE_NAMES) - set(inspect(engine).get_table_names()))
        if missing:
            errors.append(f"Tables missing: {', '.join(missing)}. Run: alembic upgrade head")
            print("FAIL Tables missing:", ", ".join(missing))
        else:
            print(f"OK  All {len(ALL_TABLE_NAMES)} tables present")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) App import (catches missing deps, bad imports)
    try:
        from activity_booking.main import app  # noqa: F401

        print("OK  App import (activity_booking.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)
        print("\nFix the above, then run:")
        print("  uvicorn activity_booking.main:app --reload --port 8000")
        return 1

    # 4) Port 8000
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: uvicorn activity_booking.main:app --reload")
    return 0


if __name__ == "__main__":
    sys.exit(main())
