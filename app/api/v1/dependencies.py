import logging
import re
from urllib.parse import unquote

from typing import Callable, Generator, Optional

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import State
from sqlalchemy.orm import Session
from jose import JWTError, ExpiredSignatureError

from app.db import session as db_session
from app.core import security
from app.models.user.user_model import User, UserRole
from app.services.certificate_service import CertificateService
from app.services.course_gateway import CourseProgressGateway
from app.services.progress_service import ProgressService

log = logging.getLogger(__name__)


def _get_state_container(request: Request | None) -> Optional[State]:
    """Return the mutable state object associated with the request."""

    if request is None:
        return None

    state = getattr(request, "state", None)
    if state is None:
        state = State()
        setattr(request, "state", state)
    return state


def get_db(request: Request = None) -> Generator[Session, None, None]:  # type: ignore[assignment]
    """Provide a SQLAlchemy session shared within a single request.

    Both the authentication dependency and the route handler ask for a
    session. We cache it on ``request.state`` with a reference counter so the
    ``User`` loaded during authentication stays attached until the last
    dependency exits.
    """

    if request is None:
        db = db_session.SessionLocal()
        try:
            yield db
        finally:
            db.close()
        return

    state = _get_state_container(request)
    db = getattr(state, "_db_session", None)
    if db is None:
        db = db_session.SessionLocal()
        setattr(state, "_db_session", db)
        setattr(state, "_db_refcount", 0)

    refcount = getattr(state, "_db_refcount", 0) + 1
    setattr(state, "_db_refcount", refcount)

    try:
        yield db
    finally:
        refcount = getattr(state, "_db_refcount", 1) - 1
        if refcount <= 0:
            try:
                db.close()
            finally:
                for attr in ("_db_session", "_db_refcount"):
                    if hasattr(state, attr):
                        delattr(state, attr)
        else:
            setattr(state, "_db_refcount", refcount)


def _normalize_token_value(raw_token: str | None) -> str | None:
    """Return a clean JWT string from an ``Authorization`` header or cookie.

    Browsers can percent-encode cookie values (``Bearer%20…``) and some
    frontends send quoted strings; ``Bearer`` prefixes are matched
    case-insensitively.
    """

    if raw_token is None:
        return None

    token = raw_token.strip().strip('"').strip("'")
    if not token:
        return None

    token = unquote(token)

    match = re.match(r"^bearer[\s,:]+(.+)$", token, flags=re.IGNORECASE)
    if match:
        token = match.group(1)

    token = token.strip()
    return token or None


def _decode_user_from_token(token: str | None, db: Session) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token",
    )

    if not token:
        log.warning("Validation échouée: Pas de token fourni.")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authorization header is missing")

    try:
        payload = security.decode_access_token(token)
        user_id_str = payload.get("sub")
        if user_id_str is None or payload.get("role") is None:
            log.warning("Validation échouée: payload du token incomplet.")
            raise credentials_exception

        user_id = int(user_id_str)
    except ExpiredSignatureError:
        log.warning("Validation échouée: Le token a expiré.")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except (JWTError, ValueError, TypeError):
        log.warning("Validation échouée: Le token est invalide ou mal formé.")
        raise credentials_exception

    user = db.get(User, user_id)
    if user is None:
        log.warning("Validation échouée: Utilisateur avec ID %s non trouvé.", user_id)
        raise credentials_exception

    if user.is_mentor_pending:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Mentor account is pending approval")

    return user


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    token_sources = (
        request.headers.get("Authorization"),
        request.cookies.get("access_token"),
    )

    for candidate in token_sources:
        token = _normalize_token_value(candidate)
        if token:
            return _decode_user_from_token(token, db)

    return _decode_user_from_token(None, db)


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """Dependency factory restricting a route to the given roles."""

    allowed = ", ".join(role.value for role in roles)

    def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            log.info("Accès refusé pour l'utilisateur %s (rôle %s)", current_user.id, current_user.role.value)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access forbidden. Required roles: {allowed}",
            )
        return current_user

    return _dependency


get_current_student = require_roles(UserRole.STUDENT)
get_current_mentor = require_roles(UserRole.MENTOR)
get_current_admin = require_roles(UserRole.ADMIN)


def get_gateway(db: Session = Depends(get_db)) -> CourseProgressGateway:
    return CourseProgressGateway(db)


def get_progress_service(gateway: CourseProgressGateway = Depends(get_gateway)) -> ProgressService:
    return ProgressService(gateway)


def get_certificate_service(
    progress_service: ProgressService = Depends(get_progress_service),
) -> CertificateService:
    return CertificateService(progress_service.gateway, progress_service=progress_service)
