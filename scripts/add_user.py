#!/usr/bin/env python3
"""
Register a user directly against the configured database.

Usage:
  python scripts/add_user.py --username alice --password secret1 [--name "Alice A."] [--bio ...] [--avatar-url ...]
"""
from __future__ import annotations

import argparse
import getpass
import sys

from trailsocial.core.config import get_settings
from trailsocial.core.errors import TrailsocialError
from trailsocial.core.logging import configure_logging
from trailsocial.db.session import Store
from trailsocial.domain.users import NewUser
from trailsocial.services.account_service import AccountService


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Register a user")
    ap.add_argument("--username", required=True, help="Unique username (max 15 chars)")
    ap.add_argument("--password", help="Password (prompted when omitted)")
    ap.add_argument("--name", help="Display name (max 50 chars)")
    ap.add_argument("--bio", help="Short bio")
    ap.add_argument("--avatar-url", help="Avatar URL (max 200 chars)")
    return ap


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)

    password = args.password or getpass.getpass("Password: ")
    with Store.from_settings(settings) as store:
        service = AccountService(store, settings)
        user = service.register(
            NewUser(
                username=args.username,
                password=password,
                name=args.name,
                bio=args.bio,
                avatar_url=args.avatar_url,
            )
        )
    print("OK: user registered")
    print(f"  ID: {user.id}")
    print(f"  Username: {user.username}")
    if user.name:
        print(f"  Name: {user.name}")


if __name__ == "__main__":
    try:
        main()
    except TrailsocialError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Error: {exc.message}\n")
        raise SystemExit(1)
