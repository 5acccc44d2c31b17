# Fichier: app/crud/user_crud.py

from sqlalchemy.orm import Session
from app.models.user.user_model import User, UserRole
from app.schemas.user.user_schema import UserCreate
from app.core.security import get_password_hash
from typing import Optional

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Récupère un utilisateur par son adresse email.

    Args:
        db: La session de base de données.
        email: L'email de l'utilisateur à rechercher (insensible à la casse).

    Returns:
        L'objet User s'il est trouvé, sinon None.
    """
    return db.query(User).filter(User.email == email.strip().lower()).first()

def create_user(db: Session, user: UserCreate) -> User:
    """
    Crée un nouvel utilisateur dans la base de données.

    Les étudiants sont approuvés d'office; un mentor attend la validation
    d'un administrateur avant de pouvoir se connecter.
    """
    role = UserRole(user.role)
    db_user = User(
        email=user.email.strip().lower(),
        hashed_password=get_password_hash(user.password),
        role=role,
        is_approved=role != UserRole.MENTOR,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

def get_users_by_ids(db: Session, user_ids: list[int]) -> list[User]:
    if not user_ids:
        return []
    return db.query(User).filter(User.id.in_(user_ids)).all()

def approve_mentor(db: Session, user: User) -> User:
    user.is_approved = True
    db.commit()
    db.refresh(user)
    return user

def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
