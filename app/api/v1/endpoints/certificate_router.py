"""Téléchargement du certificat de fin de cours (PDF)."""
from urllib.parse import quote

from fastapi import APIRouter, Depends, Response

from app.api.v1.dependencies import get_certificate_service, get_current_student
from app.models.user.user_model import User
from app.services.certificate_service import CertificateService, IssuedCertificate

router = APIRouter()


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    if ascii_name == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def build_certificate_response(issued: IssuedCertificate) -> Response:
    headers = {"Content-Disposition": _content_disposition(issued.filename)}
    if not issued.persisted:
        headers["X-Certificate-Persisted"] = "false"
    return Response(content=issued.document, media_type="application/pdf", headers=headers)


@router.get(
    "/{course_id}",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    summary="Générer ou re-télécharger le certificat d'un cours terminé",
)
def get_certificate(
    course_id: int,
    current_student: User = Depends(get_current_student),
    certificate_service: CertificateService = Depends(get_certificate_service),
) -> Response:
    issued = certificate_service.get_or_issue_certificate(current_student.id, course_id)
    return build_certificate_response(issued)
