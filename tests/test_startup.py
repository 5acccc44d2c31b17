from app.core import security
from app.main import ensure_default_admin, read_root
from app.models.user.user_model import User, UserRole


def test_default_admin_is_created_once(db_session):
    first = ensure_default_admin(db_session)
    second = ensure_default_admin(db_session)

    assert first.id == second.id
    assert first.role == UserRole.ADMIN
    assert security.verify_password("password", first.hashed_password)
    assert db_session.query(User).count() == 1


def test_root_reports_status():
    assert read_root() == {"status": "ok", "message": "Internship LMS API"}
