from campus_dashboard import seed
from campus_dashboard.models.course import CourseModel
from campus_dashboard.models.session import SessionModel
from campus_dashboard.models.user import UserModel
from campus_dashboard.utils.user_manager import verify_password


def test_seed_is_idempotent(db):
    seed.main(["--courses", "--professors"])
    seed.main(["--courses", "--professors"])

    assert db.query(CourseModel).count() == len(seed.COURSES)
    professors = db.query(UserModel).filter(UserModel.role == "professor").all()
    assert len(professors) == len(seed.PROFESSORS)
    assert db.query(SessionModel).count() == 0


def test_seed_without_options_adds_sessions_once(db):
    seed.main([])
    seed.main([])

    assert db.query(CourseModel).count() == len(seed.COURSES)
    assert db.query(SessionModel).count() == len(seed.SESSIONS)


def test_seed_students_skips_malformed_lines(db, tmp_path):
    csv_file = tmp_path / "students.csv"
    csv_file.write_text(
        "Familienname;Vorname;Program;Email\n"
        "Huber;Maria;DTI;Maria.Huber@Example.com\n"
        "Broken;Line\n"
        "\n"
        "Gruber;;DI;gruber@example.com\n"
        "Wagner;Lukas;DI;lukas.wagner@example.com\n",
        encoding="utf-8",
    )

    assert seed.seed_students(db, csv_file) == 2
    # A second import updates instead of duplicating
    assert seed.seed_students(db, csv_file) == 2

    students = db.query(UserModel).order_by(UserModel.email).all()
    assert [s.email for s in students] == ["lukas.wagner@example.com", "maria.huber@example.com"]
    maria = students[1]
    assert maria.name == "Maria Huber"
    assert maria.initials == "MH"
    assert maria.program == "DTI"
    assert maria.role == "student"


def test_set_passwords_only_touches_users_without_one(db, make_user):
    existing = make_user()
    seed.seed_professors(db)

    updated = seed.set_default_passwords(db, "Seeded123!")
    assert updated == len(seed.PROFESSORS)

    db.expire_all()
    professor = db.query(UserModel).filter(UserModel.role == "professor").first()
    assert verify_password("Seeded123!", professor.password_hash)
    assert not verify_password("Seeded123!", existing.password_hash)
