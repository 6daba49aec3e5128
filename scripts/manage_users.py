# scripts/manage_users.py

import argparse
import asyncio

from fastapi_users import exceptions
from fastapi_users.db import SQLAlchemyUserDatabase
from sqlalchemy.future import select

from app.auth.manager import UserManager
from app.db import async_session
from app.models.user import User
from app.schemas.user import UserCreate
from app.services.accounts import register_owner



async def create_owner(email: str, password: str, restaurant: str, full_name: str = None):
    async with async_session() as session:
        manager = UserManager(SQLAlchemyUserDatabase(session, User))
        try:
            user, tenant = await register_owner(
                session,
                manager,
                UserCreate(email=email, password=password),
                restaurant_name=restaurant,
                full_name=full_name,
            )
        except exceptions.UserAlreadyExists:
            print(f"⚠️  User '{email}' already exists. Skipping.")
            return
        except exceptions.InvalidPasswordException as e:
            print(f"❌ {e.reason}")
            return

        print(f"✅ Created: {user.email} | restaurant: {tenant.restaurant_name} (/{tenant.slug})")
        print(f"   user id: {user.id}  (set PRIVILEGED_USER_ID to this for platform settings)")


async def delete_user(email: str):
    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            print(f"⚠️  No user found with email: {email}")
            return
        await session.delete(user)
        await session.commit()
        print(f"🗑️  Deleted user: {email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage SnackBite accounts")
    parser.add_argument("--create", action="store_true", help="Create an owner account with its restaurant")
    parser.add_argument("--delete", action="store_true", help="Delete an account")
    parser.add_argument("--email", type=str, help="Account email")
    parser.add_argument("--password", type=str, help="Account password")
    parser.add_argument("--restaurant", type=str, help="Restaurant name")
    parser.add_argument("--name", type=str, help="Owner full name")

    args = parser.parse_args()

    if args.create and args.email and args.password and args.restaurant:
        asyncio.run(create_owner(args.email, args.password, args.restaurant, args.name))
    elif args.delete and args.email:
        asyncio.run(delete_user(args.email))
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_users --create --email a@b.com --password secret1 --restaurant 'Mama Put'")
        print("  python -m scripts.manage_users --delete --email a@b.com")
