"""
Create test user
"""
from app.infrastructure.db.session import get_session_factory
from app.auth import create_user, get_user_by_email

EMAIL = "test@example.com"
PASSWORD = "password123"

db = get_session_factory()()

existing = get_user_by_email(db, EMAIL)
if existing:
    print(f"User already exists: {EMAIL} (ID: {existing.id})")
else:
    user = create_user(db, EMAIL, PASSWORD)
    print(f"Created user (ID: {user.id}):")
    print(f"  Email: {EMAIL}")
    print(f"  Password: {PASSWORD}")

db.close()
