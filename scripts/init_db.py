"""
Create the database schema and, optionally, a local user with an access token.

    python -m scripts.init_db            # tables only
    python -m scripts.init_db alice      # tables + user "alice"
"""
import sys

from sqlalchemy import select

from app.features.auth.models.user import User
from app.features.auth.utils.security import create_access_token
from app.platform.db.session import create_tables, get_sync_db


def init_db(username=None):
    create_tables()
    print("✅ Tables created")

    if not username:
        return

    db = get_sync_db()
    try:
        user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if user is None:
            user = User(username=username, display_name=username)
            db.add(user)
            db.commit()
            print(f"✅ Created user {username} ({user.id})")
        print(f"Access token: {create_access_token({'sub': user.id})}")
    finally:
        db.close()


if __name__ == "__main__":
    init_db(sys.argv[1] if len(sys.argv) > 1 else None)
