"""
ResumeVault Database Seeder

Creates demo accounts:
- Jane Doe, with a resume and photo already on file
- Sam Lee, registered but without uploads
"""

import sys
sys.path.insert(0, ".")

from typing import Optional

from sqlalchemy.orm import Session

from resumevault.db.session import SessionLocal, engine
from resumevault.db.base import Base
from resumevault.models.user import User
from resumevault.core.security import get_password_hash

# 1x1 transparent PNG
DEMO_PHOTO = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

DEMO_RESUME = """Jane Doe
Software Engineer

Skills
Python, FastAPI, PostgreSQL

Experience
Backend Developer, Acme Corp (2021 - Present)
"""


def seed_database(db: Optional[Session] = None) -> bool:
    """
    Seed the database with demo users.

    Returns:
        True if users were created, False if the database was already seeded
    """
    owns_session = db is None
    if owns_session:
        # Create all tables
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    try:
        # Check if already seeded
        existing = db.query(User).filter(User.email == "jane.doe@example.com").first()
        if existing:
            print("Database already seeded. Skipping...")
            return False

        print("Seeding database...")

        # 1. User with a complete profile
        jane = User(
            name="Jane Doe",
            email="jane.doe@example.com",
            hashed_password=get_password_hash("password123"),
            resume_text=DEMO_RESUME,
            photo=DEMO_PHOTO,
            resume_uploaded=True,
        )
        db.add(jane)

        # 2. User who has not uploaded anything yet
        sam = User(
            name="Sam Lee",
            email="sam.lee@example.com",
            hashed_password=get_password_hash("password123"),
            resume_uploaded=False,
        )
        db.add(sam)

        db.commit()

        print("Database seeded successfully!")
        print("  User: jane.doe@example.com / password123 (profile complete)")
        print("  User: sam.lee@example.com / password123 (no uploads)")
        return True

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed_database()
