"""Database seeding command.

Usage::

    python -m campus_dashboard.seed                      # everything below
    python -m campus_dashboard.seed --courses --professors
    python -m campus_dashboard.seed --students data/users.csv
    python -m campus_dashboard.seed --set-passwords "ChangeMe123!"

Courses are matched by code, users by email, so running the command twice
does not create duplicates.
"""

import argparse
import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy.orm import Session

from campus_dashboard.config import DEFAULT_SEED_PASSWORD
from campus_dashboard.core.database import SessionLocal, init_db
from campus_dashboard.core.logging_config import setup_logging
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.session import SessionModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.course_manager import CourseManager
from campus_dashboard.utils.timeutils import as_utc
from campus_dashboard.utils.user_manager import hash_password

logger = logging.getLogger(__name__)

COURSES = [
    {"code": "ds", "title": "Data Science", "programs": ["DTI"]},
    {"code": "hti", "title": "Human-Technology Interaction", "programs": ["DTI"]},
    {"code": "inno", "title": "Innovation Design", "programs": ["DTI", "DI"]},
    {"code": "networks", "title": "Innovation Teams and Networks", "programs": ["DTI", "DI"]},
    {"code": "software", "title": "Agile Software Engineering", "programs": ["DTI", "DI"]},
    {"code": "dg", "title": "Data Governance", "programs": ["DI"]},
    {"code": "c7", "title": "Cloud-based IT-Infrastructure", "programs": ["DI"]},
]

PROFESSORS = [
    ("Manfred Bornemann", "MB", "manfred.bornemann@fhwien.ac.at"),
    ("Doro Erharter", "DE", "doro.erharter@fhwien.ac.at"),
    ("Tilia Stingl", "TS", "tilia.stingl@fhwien.ac.at"),
    ("Sebastian Eschenbach", "SE", "sebastian.eschenbach@fhwien.ac.at"),
    ("Elka Xharo", "EX", "elka.xharo@fhwien.ac.at"),
    ("Jackie Klaura", "JK", "jackie.klaura@fhwien.ac.at"),
    ("Barbara Kainz", "BK", "barbara.kainz@fhwien.ac.at"),
    ("Leo Weber", "LW", "leo.weber@fhwien.ac.at"),
    ("Paul Schmidinger", "PS", "paul.schmidinger@fhwien.ac.at"),
    ("René Gröbner", "RG", "rene.groebner@fhwien.ac.at"),
]

# (course code, type, title, start, end, location, location type)
SESSIONS = [
    ("networks", "lecture", "Innovation Teams and Networks IL",
     "2025-09-26T15:45:00+02:00", "2025-09-26T19:15:00+02:00", "B309", "on_campus"),
    ("inno", "lecture", "Innovation Design IL",
     "2025-10-03T15:45:00+02:00", "2025-10-03T19:15:00+02:00", "B309", "on_campus"),
    ("networks", "lecture", "Innovation Teams and Networks IL",
     "2025-10-04T08:30:00+02:00", "2025-10-04T12:00:00+02:00", "B309", "on_campus"),
    ("hti", "lecture", "Einstieg in Human Technology Interaction",
     "2025-10-16T18:30:00+02:00", "2025-10-16T20:05:00+02:00", "Microsoft Teams", "online"),
    ("inno", "lecture", "Innovation Design IL",
     "2025-10-17T15:45:00+02:00", "2025-10-17T19:15:00+02:00", "B309", "on_campus"),
]


def seed_courses(db: Session) -> int:
    manager = CourseManager(db)
    for course in COURSES:
        manager.upsert_course(course["code"], course["title"], course["programs"])
    logger.info("Seeded %d courses", len(COURSES))
    return len(COURSES)


def _upsert_user(db: Session, name: str, initials: str, email: str, program: Optional[str], role: str) -> UserModel:
    model = db.query(UserModel).filter(UserModel.email == email).first()
    if model is None:
        model = UserModel(email=email)
        db.add(model)
    model.name = name
    model.initials = initials
    model.program = program
    model.role = role
    return model


def seed_professors(db: Session) -> int:
    for name, initials, email in PROFESSORS:
        _upsert_user(db, name, initials, email, None, "professor")
    db.commit()
    logger.info("Seeded %d professors", len(PROFESSORS))
    return len(PROFESSORS)


def seed_students(db: Session, csv_path: Path) -> int:
    """Upsert students from a ``Familienname;Vorname;Program;Email`` CSV file.

    The first line is treated as a header; malformed lines are skipped.
    """
    count = 0
    with csv_path.open(encoding="utf-8", newline="") as f:
        reader = csv.reader(f, delimiter=";")
        next(reader, None)
        for line_no, row in enumerate(reader, start=2):
            if not any(cell.strip() for cell in row):
                continue
            if len(row) < 4 or not all(cell.strip() for cell in (row[0], row[1], row[3])):
                logger.warning("Skipping invalid line %d: %s", line_no, ";".join(row))
                continue
            last_name, first_name, program, email = (cell.strip() for cell in row[:4])
            _upsert_user(
                db,
                name=f"{first_name} {last_name}",
                initials=(first_name[0] + last_name[0]).upper(),
                email=email.lower(),
                program=program if program in ("DTI", "DI") else None,
                role="student",
            )
            count += 1
    db.commit()
    logger.info("Seeded %d students from %s", count, csv_path)
    return count


def seed_sessions(db: Session) -> int:
    """Insert the sample sessions that do not exist yet.

    Sessions are matched by course, title and start time.
    """
    courses = {c.code: c for c in db.query(CourseModel).all()}
    created = 0
    for code, kind, title, start, end, location, location_type in SESSIONS:
        course = courses.get(code)
        if course is None:
            logger.warning("Course '%s' not found, skipping session '%s'", code, title)
            continue
        start_dt = as_utc(datetime.fromisoformat(start))
        exists = (
            db.query(SessionModel)
            .filter(
                SessionModel.course_id == course.id,
                SessionModel.title == title,
                SessionModel.start_datetime == start_dt,
            )
            .first()
        )
        if exists:
            continue
        db.add(
            SessionModel(
                course_id=course.id,
                type=kind,
                title=title,
                start_datetime=start_dt,
                end_datetime=as_utc(datetime.fromisoformat(end)),
                location=location,
                location_type=location_type,
                attendance="mandatory",
                objectives=[],
            )
        )
        created += 1
    db.commit()
    logger.info("Seeded %d sessions", created)
    return created


def set_default_passwords(db: Session, password: str) -> int:
    """Give every user without a password the given one."""
    users = db.query(UserModel).filter(UserModel.password_hash.is_(None)).all()
    if users:
        hashed = hash_password(password)
        for user in users:
            user.password_hash = hashed
        db.commit()
    logger.info("Set default password for %d user(s)", len(users))
    return len(users)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the Campus Dashboard database.")
    parser.add_argument("--courses", action="store_true", help="upsert the course catalogue")
    parser.add_argument("--professors", action="store_true", help="upsert professor accounts")
    parser.add_argument("--sessions", action="store_true", help="insert sample sessions")
    parser.add_argument("--students", metavar="CSV", type=Path, help="upsert students from a CSV file")
    parser.add_argument(
        "--set-passwords",
        metavar="PASSWORD",
        nargs="?",
        const=DEFAULT_SEED_PASSWORD,
        help="set a password for users without one (default: DEFAULT_SEED_PASSWORD)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    setup_logging()
    args = build_parser().parse_args(argv)
    # Without any selection, seed the catalogue, professors and sessions
    seed_all = not (args.courses or args.professors or args.sessions or args.students or args.set_passwords)

    init_db()
    db = SessionLocal()
    try:
        if seed_all or args.courses:
            seed_courses(db)
        if seed_all or args.professors:
            seed_professors(db)
        if args.students:
            seed_students(db, args.students)
        if seed_all or args.sessions:
            seed_sessions(db)
        if args.set_passwords:
            set_default_passwords(db, args.set_passwords)
    finally:
        db.close()


if __name__ == "__main__":
    main()
