#!/usr/bin/env python
"""CLI utility to deactivate grants whose expiration has passed."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

from permission_engine.core.database import session_scope
from permission_engine.core.timeutils import ensure_utc
from permission_engine.services.authorization import AuthorizationEngine


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deactivate expired permission grants.")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        default=None,
        help="Optional ISO-8601 cut-off; defaults to the current UTC time.",
    )
    parser.add_argument("--user-id", type=int, default=None, help="Restrict the sweep to a single user.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with session_scope() as session:
        swept = AuthorizationEngine(session).sweep_expired(ensure_utc(args.as_of), user_id=args.user_id)

    logging.info("Deactivated %s expired grant(s)", swept)
    return 0


if __name__ == "__main__":
    sys.exit(main())
