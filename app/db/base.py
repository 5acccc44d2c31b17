"""Déclare l'ensemble des modèles SQLAlchemy pour ``Base.metadata.create_all``."""

from app.db.base_class import Base

# Utilisateurs
from app.models.user.user_model import User

# Cours & contenu pédagogique
from app.models.course.course_model import Course
from app.models.course.chapter_model import Chapter
from app.models.course.assignment_model import CourseAssignment

# Progression & certificats
from app.models.progress.progress_model import Progress
from app.models.progress.certificate_model import Certificate

__all__ = (
    "Base",
    "User",
    "Course",
    "Chapter",
    "CourseAssignment",
    "Progress",
    "Certificate",
)
