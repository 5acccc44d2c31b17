# Fichier: app/api/v1/api.py
from fastapi import APIRouter
from .endpoints import (
    auth_router,
    user_router,
    course_router,
    student_course_router,
    progress_router,
    certificate_router,
)

api_router = APIRouter()

api_router.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
api_router.include_router(user_router.router, prefix="/users", tags=["Users"])
api_router.include_router(course_router.router, prefix="/courses", tags=["Courses"])
api_router.include_router(student_course_router.router, prefix="/student/courses", tags=["Student"])
api_router.include_router(progress_router.router, prefix="/progress", tags=["Progress"])
api_router.include_router(certificate_router.router, prefix="/certificates", tags=["Certificates"])
