# scripts/setup/create_admin.py
"""
Bootstrap the first admin login and the admin authority that receives
"(Admin Copy)" notifications.
Usage: python scripts/setup/create_admin.py --username admin --password secret --name "Principal Office"
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables
from app.models.authority import Authority
from app.schemas.authority import AuthorityCreate
from app.schemas.user import UserCreate
from app.services.authority_service import create_authority
from app.services.exceptions import ValidationError
from app.services.user_service import create_user


def main():
    parser = argparse.ArgumentParser(description="Create the first admin user and admin authority")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    parser.add_argument("--designation", default="Admin")
    args = parser.parse_args()

    create_tables()
    db = SessionLocal()
    try:
        try:
            user = create_user(db, UserCreate(username=args.username, password=args.password, role="admin"))
            print(f"✅ Admin user '{user.username}' created")
        except ValidationError as e:
            print(f"⚠️  {e.message}")

        if db.query(Authority).filter(Authority.role == "admin").first():
            print("⚠️  An admin authority already exists, skipped")
        else:
            authority = create_authority(db, AuthorityCreate(name=args.name, designation=args.designation,
                                                             role="admin"))
            print(f"✅ Admin authority '{authority.display_name}' created (id={authority.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
