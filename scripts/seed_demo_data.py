"""Seed, inspect, export or wipe the demo data in the hosted backend.

Creates one account per role (admin, consultant, two partner clients,
auxiliary) and the demo project "Holding Família Completo".

Usage:
    uv run python -m scripts.seed_demo_data init
    uv run python -m scripts.seed_demo_data status
    uv run python -m scripts.seed_demo_data export [path/to/export.json]
    uv run python -m scripts.seed_demo_data clear --yes

Requires: SUPABASE_URL and SUPABASE_ANON_KEY (environment or .env).
clear deletes every row in every application table; never point it at
production.
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from planejar.core.config import get_settings
from planejar.infrastructure.composition import build_services
from planejar.shared.telemetry.logging import setup_logging

COMMANDS = ("init", "clear", "status", "export")
USAGE = "Usage: uv run python -m scripts.seed_demo_data {init,clear,status,export} [args]"


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees SUPABASE_* when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def run(command: str, args: list[str]) -> int:
    services = build_services(get_settings())
    migration = services.migration
    try:
        if command == "init":
            report = await migration.initialize_database()
            print(report.message)
            for line in report.details:
                print(f"  {line}" if line else "")
            return 0 if report.success else 1

        if command == "status":
            status = await migration.get_status()
            print(f"Seeded:   {'yes' if status.is_seeded else 'no'}")
            print(f"Users:    {status.user_count}")
            print(f"Projects: {status.project_count}")
            return 0

        if command == "export":
            snapshot = await migration.export_database()
            if snapshot is None:
                print("Export failed", file=sys.stderr)
                return 1
            text = json.dumps(snapshot, indent=2, ensure_ascii=False)
            if args:
                Path(args[0]).write_text(text, encoding="utf-8")
                print(f"Exported to {args[0]}")
            else:
                print(text)
            return 0

        if "--yes" not in args:
            print("clear deletes ALL data; re-run with --yes to confirm", file=sys.stderr)
            return 1
        ok = await migration.clear_database()
        print("Database cleared" if ok else "Clear failed")
        return 0 if ok else 1
    finally:
        await services.aclose()


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        print(USAGE, file=sys.stderr)
        sys.exit(1)
    _load_env()
    setup_logging()
    sys.exit(asyncio.run(run(sys.argv[1], sys.argv[2:])))


if __name__ == "__main__":
    main()
