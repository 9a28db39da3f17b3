#!/usr/bin/env python3
"""
Print one page of users, newest first.

Usage:
  python scripts/list_users.py [--page 1] [--limit 10]   (--limit 0 lists everyone)
"""
from __future__ import annotations

import argparse
import sys

from trailsocial.core.config import get_settings
from trailsocial.core.errors import TrailsocialError
from trailsocial.core.logging import configure_logging
from trailsocial.db.session import Store
from trailsocial.services.account_service import AccountService


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="List users")
    ap.add_argument("--page", default=None, help="Page number (default: 1)")
    ap.add_argument("--limit", default=None, help="Page size, 0 for all (default: USERS_PAGE_LIMIT)")
    args = ap.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)
    with Store.from_settings(settings) as store:
        result = AccountService(store, settings).list_users(args.page, args.limit)

    print(f"Page {result.page}/{result.total_pages} ({result.total_results} users)")
    for user in result.users:
        label = f" - {user.name}" if user.name else ""
        print(f"  {user.username}{label}  [{user.id}]")


if __name__ == "__main__":
    try:
        main()
    except TrailsocialError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc.message}\n")
        raise SystemExit(1)
