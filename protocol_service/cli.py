"""
Migration command line.

Reads database settings from the environment (``DATABASE_URL`` or the
``POSTGRES_*`` components) and drives the Alembic revision chain.

Usage:
  protocol-service-migrate upgrade
  protocol-service-migrate downgrade [TARGET]
  protocol-service-migrate current
  protocol-service-migrate pending [--json]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from protocol_service.config import Settings
from protocol_service.db import migrate


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="protocol-service-migrate", description="Manage the protocol service schema.")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("upgrade", help="apply every pending revision")
    down = sub.add_parser("downgrade", help="revert to a revision (default: base)")
    down.add_argument("target", nargs="?", default="base")
    sub.add_parser("current", help="print the applied revision")
    pending = sub.add_parser("pending", help="list revisions not yet applied")
    pending.add_argument("--json", action="store_true", help="print JSON instead of one id per line")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    if args.command == "upgrade":
        applied = migrate.upgrade_to_head(settings)
        print(f"applied {len(applied)} revision(s)")
    elif args.command == "downgrade":
        migrate.downgrade(settings, args.target)
        print(f"downgraded to {args.target}")
    elif args.command == "current":
        print(migrate.current_revision(settings) or "base")
    elif args.command == "pending":
        pending = migrate.pending_revisions(settings)
        if args.json:
            print(json.dumps(pending))
        else:
            for rev in pending:
                print(rev)
    return 0


if __name__ == "__main__":
    sys.exit(main())
