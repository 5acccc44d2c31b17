import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Imports de l'application
from app.api.v1.api import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.security import get_password_hash
from app.db import session as db_session
from app.db.base import Base
from app.models.user.user_model import User, UserRole

# --- Configuration du logging ---
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# --- Initialisation de l'application FastAPI ---
app = FastAPI(
    title="Internship LMS API",
    openapi_url="/api/v1/openapi.json",
)


def _sanitize_origin(origin: str | None) -> str | None:
    if not origin:
        return None
    value = origin.strip()
    if not value:
        return None
    if not value.startswith("http"):
        value = f"https://{value}"
    return value.rstrip("/")


def _build_cors_origins() -> list[str]:
    base_origins = {_sanitize_origin(o) for o in settings.BACKEND_CORS_ORIGINS}

    additional = os.getenv("ADDITIONAL_CORS_ORIGINS")
    if additional:
        for origin in additional.split(","):
            base_origins.add(_sanitize_origin(origin))

    allow_origins = sorted({origin for origin in base_origins if origin})
    logger.info("CORS origins configurés: %s", allow_origins)
    return allow_origins


# --- Configuration des Middlewares ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=_build_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
    expose_headers=["Content-Disposition", "X-Certificate-Persisted"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


def ensure_default_admin(session) -> User:
    """Create the bootstrap administrator when no account uses its email."""
    email = settings.DEFAULT_ADMIN_EMAIL.strip().lower()
    admin_user = session.query(User).filter(User.email == email).first()
    if admin_user is not None:
        logger.info("Administrateur par défaut déjà présent.")
        return admin_user

    logger.info("Création de l'administrateur par défaut '%s'.", email)
    admin_user = User(
        email=email,
        hashed_password=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
        is_approved=True,
    )
    session.add(admin_user)
    session.commit()
    logger.info("✅ Administrateur par défaut créé.")
    return admin_user


# --- Événement de Démarrage ---
@app.on_event("startup")
def startup():
    logger.info("Vérification et création des tables de la base de données...")
    Base.metadata.create_all(bind=db_session.engine)
    logger.info("✅ Les tables de la base de données sont prêtes.")

    with db_session.SessionLocal() as session:
        ensure_default_admin(session)


# --- Route Racine ---
@app.get("/")
def read_root():
    return {"status": "ok", "message": "Internship LMS API"}


@app.get("/health")
def health():
    return {"status": "ok", "environment": settings.ENVIRONMENT}
