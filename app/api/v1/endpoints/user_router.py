# Fichier: app/api/v1/endpoints/user_router.py

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.dependencies import get_current_admin, get_db
from app.core.errors import NotFoundError, ValidationError
from app.crud import user_crud
from app.models.user.user_model import User, UserRole
from app.schemas.response_schema import success_response
from app.schemas.user import user_schema

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("")
def list_users(db: Session = Depends(get_db), current_admin: User = Depends(get_current_admin)) -> dict:
    users = user_crud.list_users(db)
    return success_response(
        "Users fetched successfully",
        {
            "users": [user_schema.User.model_validate(u).model_dump(mode="json") for u in users],
            "count": len(users),
        },
    )


@router.put("/{user_id}/approve-mentor")
def approve_mentor(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.role != UserRole.MENTOR:
        raise ValidationError("User is not a mentor. Only mentors can be approved.")
    if user.is_approved:
        raise ValidationError("Mentor is already approved")

    user = user_crud.approve_mentor(db, user)
    logger.info("Mentor %s approuvé par l'administrateur %s", user.id, current_admin.id)
    return success_response(
        "Mentor approved successfully",
        {"user": user_schema.User.model_validate(user).model_dump(mode="json")},
    )


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
) -> dict:
    if user_id == current_admin.id:
        raise ValidationError("You cannot delete your own account")

    user = _get_user_or_404(db, user_id)
    user_crud.delete_user(db, user)
    logger.info("Utilisateur %s supprimé par l'administrateur %s", user_id, current_admin.id)
    return success_response("User deleted successfully", {"deletedUserId": user_id})
