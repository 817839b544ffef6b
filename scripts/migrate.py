#!/usr/bin/env python3
"""
Apply or author schema migrations for the queue database.

Usage:
    python scripts/migrate.py                     # upgrade to head
    python scripts/migrate.py downgrade -1
    python scripts/migrate.py create "add column"
    python scripts/migrate.py current
"""

import argparse
import sys

from alembic import command
from alembic.config import Config


def alembic_config() -> Config:
    """Alembic configuration; env.py reads the database URL from settings."""
    return Config("alembic.ini")


def main() -> int:
    """Parse arguments and run the requested migration command."""
    parser = argparse.ArgumentParser(description="Manage queue database migrations")
    subparsers = parser.add_subparsers(dest="action")

    upgrade = subparsers.add_parser("upgrade", help="Upgrade to a revision (default: head)")
    upgrade.add_argument("revision", nargs="?", default="head")

    downgrade = subparsers.add_parser("downgrade", help="Downgrade to a revision")
    downgrade.add_argument("revision")

    create = subparsers.add_parser("create", help="Autogenerate a new revision")
    create.add_argument("message", nargs="+")

    subparsers.add_parser("current", help="Show the applied revision")

    args = parser.parse_args()
    config = alembic_config()
    action = args.action or "upgrade"

    try:
        if action == "upgrade":
            revision = getattr(args, "revision", "head")
            print(f"Upgrading database to {revision}...")
            command.upgrade(config, revision)
        elif action == "downgrade":
            print(f"Downgrading database to {args.revision}...")
            command.downgrade(config, args.revision)
        elif action == "create":
            message = " ".join(args.message)
            print(f"Creating migration: {message}")
            command.revision(config, message=message, autogenerate=True)
        else:
            command.current(config, verbose=True)
    except Exception as e:
        print(f"✗ Migration command '{action}' failed: {e}", file=sys.stderr)
        return 1

    print("✓ Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
