"""
repositories/disease_repo.py
----------------------------
Data access layer for diseases and disease types.
"""

from models.disease import Disease, DiseaseType
from repositories.base import EntityRepository


class DiseaseTypeRepository(EntityRepository[DiseaseType]):
    """Disease types get their id from a SERIAL column on insert."""

    entity = DiseaseType
    table = "DiseaseType"
    columns = {"id": "id", "description": "description"}
    key_fields = ("id",)
    mutable_fields = ("description",)
    generated_fields = ("id",)


class DiseaseRepository(EntityRepository[Disease]):
    """Repository for CRUD operations on the Disease table."""

    entity = Disease
    table = "Disease"
    columns = {
        "code": "disease_code",
        "pathogen": "pathogen",
        "description": "description",
        "disease_type_id": "id",
    }
    key_fields = ("code",)
    mutable_fields = ("pathogen", "description", "disease_type_id")
