"""
models/disease.py
-----------------
Domain models for diseases and the disease types they belong to.
"""

from dataclasses import dataclass
from typing import Optional

from utils.validators import require_int, require_optional_int, require_text


@dataclass
class DiseaseType:
    """
    A category of diseases (e.g. 'viral', 'bacterial').

    Attributes:
        description: Human-readable description.
        id: Database primary key (None until the row is created).
    """
    description: str
    id: Optional[int] = None

    def validate(self) -> None:
        require_text(self.description, "description")
        require_optional_int(self.id, "id")


@dataclass
class Disease:
    """
    A disease, identified by its code.

    Attributes:
        code: Unique disease code (e.g. 'COVID-19').
        pathogen: Causing agent ('virus', 'bacteria', ...).
        description: Free-text description.
        disease_type_id: The DiseaseType this disease belongs to.
    """
    code: str
    pathogen: str
    description: str
    disease_type_id: int

    def validate(self) -> None:
        require_text(self.code, "code")
        require_text(self.pathogen, "pathogen")
        require_text(self.description, "description")
        require_int(self.disease_type_id, "disease_type_id")
