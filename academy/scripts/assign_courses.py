#!/usr/bin/env python3
"""
Set or extend the ordered list of courses assigned to a student.

The order given is the order the student sees on their dashboard.

Usage:
    # Replace the assignment:
    python academy/scripts/assign_courses.py --email alice@example.com --course-ids <id1> <id2>

    # Append to the existing assignment (ids already assigned keep their place):
    python academy/scripts/assign_courses.py --email alice@example.com --course-ids <id3> --append

    # Dry-run (print the resulting list without writing):
    python academy/scripts/assign_courses.py --email alice@example.com --course-ids <id1> --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

if __package__ in (None, ""):
    repo_root = Path(__file__).resolve().parents[2]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.db.session import SessionLocal
from academy.models import Course, User
from academy.schemas.users import normalize_id_list
from academy.services.lookup import parse_uuid


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Assign an ordered list of courses to a student",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--email", required=True, help="Student email")
    parser.add_argument("--course-ids", nargs="+", required=True, metavar="COURSE_ID", help="Course ids, in display order")
    parser.add_argument("--append", action="store_true", help="Append to the current assignment instead of replacing it")
    parser.add_argument("--dry-run", action="store_true", help="Print what would happen without writing to DB")
    return parser.parse_args(argv)


def unknown_course_ids(db: Session, course_ids: list[str]) -> list[str]:
    parsed = {course_id: parse_uuid(course_id) for course_id in course_ids}
    valid = [value for value in parsed.values() if value is not None]
    existing = {str(row) for row in db.execute(select(Course.id).where(Course.id.in_(valid))).scalars().all()} if valid else set()
    return [course_id for course_id, value in parsed.items() if value is None or str(value) not in existing]


def merged_assignment(current: list[str], course_ids: list[str], append: bool) -> list[str]:
    if append:
        return normalize_id_list([*current, *course_ids])
    return normalize_id_list(course_ids)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    email = args.email.strip().lower()

    with SessionLocal() as db:
        user = db.execute(select(User).where(User.email == email)).scalars().first()
        if not user:
            print(f"Error: user not found: {email}", file=sys.stderr)
            return 1

        missing = unknown_course_ids(db, args.course_ids)
        if missing:
            print(f"Error: unknown course ids: {', '.join(missing)}", file=sys.stderr)
            return 1

        assignment = merged_assignment(list(user.assigned_course_ids or []), args.course_ids, args.append)
        print(f"{email}: {len(assignment)} course(s) assigned")
        for position, course_id in enumerate(assignment, start=1):
            print(f"  {position:>2}. {course_id}")

        if args.dry_run:
            print("\n[dry-run] No changes made.")
            return 0

        user.assigned_course_ids = assignment
        db.commit()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
