# Fichier: app/schemas/user/user_schema.py
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Literal
from datetime import datetime

# --- import models ---
from app.models.user.user_model import UserRole

# --- Schéma pour la Création d'Utilisateur ---
# C'est ce que l'API attendra dans le corps d'une requête POST /auth/register.
# Un administrateur ne peut pas s'auto-inscrire.
class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Literal["student", "mentor"] = "student"

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# --- Schéma pour la Réponse de l'API ---
# Note : Il n'y a PAS de mot de passe ici pour des raisons de sécurité.
class UserSummary(BaseModel):
    id: int
    email: EmailStr
    role: UserRole

    model_config = ConfigDict(from_attributes=True)

class User(UserSummary):
    is_approved: bool
    created_at: datetime | None = None
