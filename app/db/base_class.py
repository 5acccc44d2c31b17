# Fichier: app/db/base_class.py
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    """Base déclarative commune aux utilisateurs, cours, chapitres, affectations,
    progressions et certificats."""
