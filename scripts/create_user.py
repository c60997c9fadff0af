"""
Create a login for the inventory API.

    python scripts/create_user.py alice --role admin
"""
import argparse
import getpass

from inventory_api.core.db import get_sessionmaker
from inventory_api.core.policy import ADMIN, USER
from inventory_api.core.security import get_password_hash
from inventory_api.errors import DuplicateKey
from inventory_api.repositories import create_user


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an inventory-api user")
    parser.add_argument("username")
    parser.add_argument("--role", choices=[ADMIN, USER], default=USER)
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        parser.error("password must not be empty")

    with get_sessionmaker()() as db:
        try:
            user = create_user(db, args.username, get_password_hash(password), role=args.role)
        except DuplicateKey as e:
            print(e.details)
            return 1
    print(f"created user {user.username!r} (id={user.id}, role={user.role})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
