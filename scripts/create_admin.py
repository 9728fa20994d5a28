"""
Name: Admin Bootstrap Script

Responsibilities:
  - Create a console account from the command line (idempotent by email)
  - Hash passwords with Argon2 (via CredentialStore)
  - Store the account in PostgreSQL
"""

from __future__ import annotations

import argparse
import getpass
import sys

from backoffice.crosscutting.config import get_settings
from backoffice.domain.entities import UserRole
from backoffice.domain.errors import DuplicateEmailError
from backoffice.identity.credentials import CredentialStore, normalize_email
from backoffice.infrastructure.db.pool import close_pool, init_pool
from backoffice.infrastructure.repositories.postgres import PostgresUserRepository


def _prompt_password() -> str:
    password = getpass.getpass("Password: ")
    if not password:
        raise SystemExit("Password is required.")
    confirm = getpass.getpass("Confirm password: ")
    if password != confirm:
        raise SystemExit("Passwords do not match.")
    return password


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "--":
        argv = argv[1:]
    parser = argparse.ArgumentParser(description="Create a console account.")
    parser.add_argument("--name", default="System Admin", help="Display name")
    parser.add_argument("--email", required=True, help="Email (will be normalized)")
    parser.add_argument(
        "--password",
        help="Password (omit to be prompted securely)",
    )
    parser.add_argument(
        "--role",
        default=UserRole.ADMIN.value,
        choices=[role.value for role in UserRole],
        help="Account role (default: admin)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = get_settings()
    if settings.store_backend != "postgres":
        raise SystemExit("STORE_BACKEND=postgres is required to create a user.")

    email = normalize_email(args.email)
    if not email:
        raise SystemExit("Email is required.")
    password = args.password or _prompt_password()

    init_pool(
        database_url=settings.database_url,
        min_size=1,
        max_size=settings.db_pool_max_size,
    )
    try:
        credentials = CredentialStore(PostgresUserRepository())
        try:
            user = credentials.create(
                args.name, email, password, UserRole(args.role)
            )
        except DuplicateEmailError:
            print(f"User already exists: email={email}")
            return
        print(f"Created user: id={user.id} email={user.email} role={user.role.value}")
    finally:
        close_pool()


if __name__ == "__main__":
    main()
