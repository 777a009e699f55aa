#!/usr/bin/env python3
"""
Admin tooling.

    python -m studio.manage hash-password   Generate ADMIN_PASSWORD_HASH for .env
    python -m studio.manage init-db         Create tables and the homepage settings row
"""
import argparse
import asyncio
import getpass
import sys

from studio.utils.auth import hash_password


def hash_password_command(args) -> int:
    """Prompt for the admin password twice and print the .env line."""
    print("=" * 60)
    print("CMS Admin Password Hash Generator")
    print("=" * 60)
    print()

    password = getpass.getpass("Enter admin password: ")
    if not password:
        print("Error: Password cannot be empty")
        return 1

    if getpass.getpass("Confirm password: ") != password:
        print("Error: Passwords do not match")
        return 1

    hashed = hash_password(password, rounds=args.rounds)
    print("\nCopy this line to your .env file:\n")
    print(f"ADMIN_PASSWORD_HASH={hashed}")
    print("\nKeep this hash secret and never commit it to version control!")
    return 0


async def _init_db() -> None:
    from studio.database import AsyncSessionLocal, close_db, create_tables
    from studio.services.catalog import ensure_homepage_settings

    await create_tables()
    async with AsyncSessionLocal() as session:
        homepage = await ensure_homepage_settings(session)
        print(f"Homepage settings row ready (id={homepage.id})")
    await close_db()


def init_db_command(args) -> int:
    asyncio.run(_init_db())
    print("Database initialized")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studio.manage", description="Studio API admin tooling")
    subparsers = parser.add_subparsers(dest="command", required=True)

    hash_parser = subparsers.add_parser("hash-password", help="generate a bcrypt hash for the admin password")
    hash_parser.add_argument("--rounds", type=int, default=12, help="bcrypt cost factor (default: 12)")
    hash_parser.set_defaults(func=hash_password_command)

    init_parser = subparsers.add_parser("init-db", help="create tables and the homepage settings row")
    init_parser.set_defaults(func=init_db_command)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
