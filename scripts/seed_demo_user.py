"""Seed a verified demo account for local development."""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db
from models.user import User

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "DemoPass123"


def main() -> None:
    app = create_app()
    with app.app_context():
        db.create_all()
        user = User.query.filter_by(email=DEMO_EMAIL).first()
        if user is None:
            user = User(
                first_name="Demo",
                last_name="User",
                email=DEMO_EMAIL,
                country="United States",
                city="Denver",
            )
            db.session.add(user)
            action = "created"
        else:
            action = "updated"
        user.set_password(DEMO_PASSWORD)
        user.mark_verified()
        db.session.commit()
        print(f"Demo user {action}: {DEMO_EMAIL}")


if __name__ == "__main__":
    main()
