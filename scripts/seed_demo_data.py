#!/usr/bin/env python3
"""Seed demo data.

Creates a demo user with a handful of todos, some of them completed, and
prints a token that can be sent as the ``x-auth`` header.

Usage:
    DATABASE_URL=sqlite:///./todo_app.db python scripts/seed_demo_data.py
"""

import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.config import get_settings
from src.database import init_db
from src.models import Todo, User
from src.services.auth import issue_token, register
from src.services.todo_service import TodoService

DATABASE_URL = os.getenv("DATABASE_URL", get_settings().database_url)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demopass123"

DEMO_TODOS = [
    ("Buy groceries", False),
    ("Renew passport", False),
    ("Book dentist appointment", True),
    ("Water the plants", True),
    ("Finish quarterly report", False),
]


def seed_demo_data():
    """Seed the database with a demo user and todos."""
    engine = create_engine(DATABASE_URL)
    init_db(bind=engine)
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        # Check if demo user already exists
        existing_user = session.query(User).filter_by(email=DEMO_EMAIL).first()
        if existing_user:
            print("Demo data already exists. Clearing and re-seeding...")
            session.query(Todo).filter_by(owner_id=existing_user.id).delete()
            session.delete(existing_user)
            session.commit()

        print("Creating demo user...")
        user = register(session, DEMO_EMAIL, DEMO_PASSWORD)

        print("Creating todos...")
        service = TodoService(session)
        for text, completed in DEMO_TODOS:
            todo = service.create(user.id, text)
            if completed:
                service.update_for_owner(user.id, todo.id, {"completed": True})

        token = issue_token(session, user)
        print("Demo data seeded successfully!")
        print(f"x-auth: {token}")

    except Exception as e:
        session.rollback()
        print(f"Error seeding demo data: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_demo_data()
