# Fichier: app/api/v1/endpoints/auth_router.py

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_current_user, get_db
from app.core import security
from app.core.errors import ConflictError, ForbiddenError
from app.crud import user_crud
from app.models.user.user_model import User
from app.schemas.response_schema import success_response
from app.schemas.user import user_schema

router = APIRouter()
logger = logging.getLogger(__name__)


def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")


def _session_payload(user: User) -> dict:
    token = security.create_access_token(subject=user.id, role=user.role.value)
    return {
        "user": user_schema.UserSummary.model_validate(user).model_dump(mode="json"),
        "token": token,
    }


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_in: user_schema.UserCreate, db: Session = Depends(get_db)) -> dict:
    if user_crud.get_user_by_email(db, email=user_in.email):
        raise ConflictError("User with this email already exists")

    user = user_crud.create_user(db=db, user=user_in)
    logger.info("Nouvel utilisateur %s inscrit (rôle %s)", user.id, user.role.value)

    if user.is_mentor_pending:
        # Pas de token tant que l'administrateur n'a pas validé le mentor.
        return success_response(
            "Mentor registered successfully. Awaiting admin approval.",
            {"user": user_schema.UserSummary.model_validate(user).model_dump(mode="json")},
        )
    return success_response("User registered successfully", _session_payload(user))


@router.post("/login")
def login(credentials: user_schema.LoginRequest, db: Session = Depends(get_db)) -> dict:
    user = user_crud.get_user_by_email(db, email=credentials.email)
    if user is None:
        raise _invalid_credentials()

    if user.is_mentor_pending:
        raise ForbiddenError("Mentor account is pending approval")

    if not security.verify_password(credentials.password, user.hashed_password):
        raise _invalid_credentials()

    return success_response("Login successful", _session_payload(user))


@router.get("/me")
def read_me(current_user: User = Depends(get_current_user)) -> dict:
    return success_response(
        "Profile accessed successfully",
        {"user": user_schema.User.model_validate(current_user).model_dump(mode="json")},
    )
