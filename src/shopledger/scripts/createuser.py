"""Interactive command for creating shopkeeper logins."""

import asyncio
import sys
from getpass import getpass

from sqlalchemy import select

from shopledger.core.db import AsyncSessionLocal
from shopledger.core.logging import get_logger
from shopledger.core.security import hash_password
from shopledger.core.validators import validate_email
from shopledger.models.user import User

logger = get_logger(__name__)


def prompt_for_email() -> str:
    while True:
        try:
            email = validate_email(input("Email address: "))
        except ValueError as e:
            print(f"❌ {e}")
            continue

        if not email:
            print("❌ Email cannot be empty")
            continue

        return email


def prompt_for_password() -> str:
    """Prompt for password with validation."""
    while True:
        password = getpass("Password: ")

        if len(password) < 8:
            print("❌ Password must be at least 8 characters")
            continue

        password_confirm = getpass("Password (confirm): ")

        if password != password_confirm:
            print("❌ Passwords don't match")
            continue

        return password


async def create_user() -> None:
    """Interactive shopkeeper creation."""
    print("\n" + "=" * 50)
    print("ShopLedger - Create shopkeeper")
    print("=" * 50 + "\n")

    async with AsyncSessionLocal() as db:
        email = prompt_for_email()

        stmt = select(User).where(User.email == email)
        result = await db.execute(stmt)
        if result.scalar_one_or_none():
            print(f"❌ User with email '{email}' already exists\n")
            return

        name = input("Name: ").strip()
        business_name = input("Business name (optional): ").strip() or None
        password = prompt_for_password()

        user = User(
            email=email,
            hashed_password=hash_password(password),
            name=name,
            business_name=business_name,
            is_active=True,
        )

        db.add(user)
        await db.commit()

        logger.info("user.created", user_id=str(user.id), email=email)
        print("\n✅ Shopkeeper created successfully!")
        print(f"   Email: {email}")
        print(f"   ID: {user.id}\n")


def main() -> None:
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except Exception as e:
        logger.error("createuser_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
