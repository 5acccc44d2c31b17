import pytest
from fastapi import HTTPException

from app.api.v1.endpoints import auth_router, user_router
from app.core import security
from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models.user.user_model import UserRole
from app.schemas.user.user_schema import LoginRequest, UserCreate
from tests.utils import create_admin, create_mentor, create_student


def test_register_student_returns_token(db_session):
    response = auth_router.register(
        UserCreate(email="New@Example.com", password="secret1"), db=db_session
    )

    data = response["data"]
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "student"
    payload = security.decode_access_token(data["token"])
    assert payload["sub"] == str(data["user"]["id"])
    assert payload["role"] == "student"


def test_register_rejects_duplicate_email(db_session):
    auth_router.register(UserCreate(email="dup@example.com", password="secret1"), db=db_session)

    with pytest.raises(ConflictError):
        auth_router.register(UserCreate(email="dup@example.com", password="secret2"), db=db_session)


def test_short_password_is_invalid():
    with pytest.raises(ValueError):
        UserCreate(email="short@example.com", password="123")


def test_mentor_waits_for_approval(db_session):
    response = auth_router.register(
        UserCreate(email="mentor@example.com", password="secret1", role="mentor"), db=db_session
    )

    assert "token" not in response["data"]
    with pytest.raises(ForbiddenError):
        auth_router.login(LoginRequest(email="mentor@example.com", password="secret1"), db=db_session)


def test_login_checks_password(db_session):
    auth_router.register(UserCreate(email="login@example.com", password="secret1"), db=db_session)

    with pytest.raises(HTTPException) as exc_info:
        auth_router.login(LoginRequest(email="login@example.com", password="wrong"), db=db_session)
    assert exc_info.value.status_code == 401

    response = auth_router.login(LoginRequest(email="login@example.com", password="secret1"), db=db_session)
    assert response["message"] == "Login successful"


def test_admin_approves_mentor(db_session):
    admin = create_admin(db_session)
    mentor = create_mentor(db_session, is_approved=False)

    response = user_router.approve_mentor(mentor.id, db=db_session, current_admin=admin)

    assert response["data"]["user"]["is_approved"] is True
    with pytest.raises(ValidationError):
        user_router.approve_mentor(mentor.id, db=db_session, current_admin=admin)


def test_only_mentors_can_be_approved(db_session):
    admin = create_admin(db_session)
    student = create_student(db_session)

    with pytest.raises(ValidationError):
        user_router.approve_mentor(student.id, db=db_session, current_admin=admin)
    with pytest.raises(NotFoundError):
        user_router.approve_mentor(999, db=db_session, current_admin=admin)


def test_admin_cannot_delete_self(db_session):
    admin = create_admin(db_session)
    student = create_student(db_session)

    with pytest.raises(ValidationError):
        user_router.delete_user(admin.id, db=db_session, current_admin=admin)

    response = user_router.delete_user(student.id, db=db_session, current_admin=admin)
    assert response["data"] == {"deletedUserId": student.id}

    listing = user_router.list_users(db=db_session, current_admin=admin)
    assert [u["role"] for u in listing["data"]["users"]] == [UserRole.ADMIN.value]
