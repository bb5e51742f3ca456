"""
Admin Bootstrap for Realtor.uz
Creates the first admin account. Does nothing if an admin already exists.

Usage:
    python scripts/create_admin.py
    python scripts/create_admin.py --email boss@realtor.uz --password 'S3cret!'

Defaults come from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_PHONE.
"""

import argparse
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.batch import batch_session, run_script
from app.core.config import settings
from app.core.monitoring import StructuredLogger
from app.services.user_service import user_service

TASK_TYPE = "create_admin"

structured_logger = StructuredLogger(__name__)


async def create_admin(email: str, password: str, phone: str = None):
    async with batch_session() as db:
        admin, created = await user_service.ensure_admin(db, email=email, password=password, phone=phone)

    if not created:
        print(f"ℹ️  Admin already exists: {admin.email}")
        return

    structured_logger.info("Admin user created", user_id=admin.id, email=admin.email)

    print("✅ Admin user created successfully!")
    print(f"  Name:     {admin.full_name}")
    print(f"  Email:    {admin.email}")
    print(f"  Password: {password}")
    if admin.phone:
        print(f"  Phone:    {admin.phone}")
    print("\n⚠️  Change the password after the first login")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first admin user")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.ADMIN_PASSWORD)
    parser.add_argument("--phone", default=settings.ADMIN_PHONE)

    args = parser.parse_args()

    run_script(TASK_TYPE, lambda: create_admin(args.email, args.password, args.phone))
