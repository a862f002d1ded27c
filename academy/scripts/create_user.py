from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running this file directly: `python academy/scripts/create_user.py`
if __package__ in (None, ""):
    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.security import hash_password
from academy.db.session import SessionLocal
from academy.models import User
from academy.services.auth_service import default_avatar_url


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update an academy user.")
    parser.add_argument("--email", required=True, help="User email")
    parser.add_argument("--password", required=True, help="Plain password (will be hashed)")
    parser.add_argument("--name", default="", help="Display name (defaults to the email's local part)")
    parser.add_argument("--role", choices=["STUDENT", "CREATOR"], default="STUDENT", help="User role")
    return parser.parse_args(argv)


def upsert_user(db: Session, email: str, password: str, name: str, role: str) -> tuple[User, bool]:
    """Create the user, or reset name/password/role of an existing one. Returns (user, created)."""
    user = db.execute(select(User).where(User.email == email)).scalars().first()
    created = False
    if not user:
        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            avatar_url=default_avatar_url(name),
            assigned_course_ids=[],
        )
        db.add(user)
        created = True
    else:
        user.name = name
        user.password_hash = hash_password(password)
        user.role = role
    db.commit()
    db.refresh(user)
    return user, created


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    email = args.email.strip().lower()
    name = args.name.strip() or email.split("@")[0]

    if len(args.password) < 8:
        print("Error: password must be at least 8 characters", file=sys.stderr)
        return 2

    with SessionLocal() as db:
        user, created = upsert_user(db, email, args.password, name, args.role)

    print({"ok": True, "created": created, "id": str(user.id), "email": email, "name": name, "role": args.role})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
