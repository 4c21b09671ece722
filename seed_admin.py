# seed_admin.py
"""Seed the database with an initial admin user."""

import os
import sys

from deploy_platform.container import build_container
from deploy_platform.core.errors import PlatformError


def main():
    email = os.environ.get("ADMIN_EMAIL", "admin@cosmicsynched.com")
    password = os.environ.get("ADMIN_PASSWORD")
    name = os.environ.get("ADMIN_NAME", "Admin User")

    if not password:
        print("❌ Set ADMIN_PASSWORD before seeding the admin user")
        sys.exit(1)

    print("🌱 Seeding admin user...")
    print()

    container = build_container()
    container.database.open()

    try:
        container.database.create_all()

        existing = container.user_repository.get_by_email(email)
        if existing:
            print(f"⚠️  Admin user already exists: {existing.email} ({existing.role.value})")
            return

        try:
            user = container.user_service.create_user(
                name=name,
                email=email,
                password=password,
                role="admin",
            )
        except PlatformError as e:
            print(f"❌ Could not create admin user: {e}")
            sys.exit(1)

        print(f"✅ Created admin user {user.email}")
        print(f"   ID: {user.user_id}")
        print()
        print("🎉 Admin seeding complete! Change the password after first login.")
    finally:
        container.database.close()


if __name__ == "__main__":
    main()
