"""CLI tool for admin operations.

Usage:
    python -m auth_service.cli create-user
    python -m auth_service.cli reset-2fa <username>
"""

import sys
import getpass

from sqlmodel import Session

from auth_service.config import settings
from auth_service.database import engine, create_db_and_tables
from auth_service.models.user import User
from auth_service.services.auth import hash_password, identity_of
from auth_service.services.two_factor import TwoFactorLifecycle
from auth_service.services.user_store import SqlUserStore


def create_user():
    """Create a user account without a second factor."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    email = input("Email: ").strip().lower()
    if "@" not in email:
        print("Email is not valid.")
        sys.exit(1)

    with Session(engine) as session:
        store = SqlUserStore(session)
        if store.find_by_username(username) or store.find_by_email(email):
            print(f"User '{username}' or '{email}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    user = User(
        username=username,
        email=email,
        hashed_password=hash_password(password),
    )

    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{username}' created successfully.")
    print("Enable 2FA from the account settings once logged in.")


def reset_two_factor(username: str):
    """Erase a user's 2FA secret, e.g. after a lost authenticator."""
    create_db_and_tables()

    with Session(engine) as session:
        store = SqlUserStore(session)
        user = store.find_by_username(username)
        if user is None:
            print(f"User '{username}' not found.")
            sys.exit(1)

        lifecycle = TwoFactorLifecycle(
            store,
            issuer=settings.totp_issuer,
            valid_window=settings.totp_valid_window,
        )
        lifecycle.disable(identity_of(user))

    print(f"2FA reset for '{username}'. Sessions already issued stay valid until they expire.")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m auth_service.cli <command>")
        print("Commands: create-user, reset-2fa <username>")
        sys.exit(1)

    command = sys.argv[1]
    if command == "create-user":
        create_user()
    elif command == "reset-2fa":
        if len(sys.argv) < 3:
            print("Usage: python -m auth_service.cli reset-2fa <username>")
            sys.exit(1)
        reset_two_factor(sys.argv[2])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
