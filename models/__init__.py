"""
models/ - Domain Models
=======================
Plain dataclasses, one per table. Each model validates its own fields;
relationships are stored as foreign-key values, never as nested objects.
"""

from models.country import Country
from models.disease import Disease, DiseaseType
from models.people import Doctor, Patient, PublicServant, User
from models.relations import Discover, PatientDisease, Record, Specialize

__all__ = [
    "Country",
    "Disease",
    "DiseaseType",
    "Doctor",
    "Patient",
    "PublicServant",
    "User",
    "Discover",
    "PatientDisease",
    "Record",
    "Specialize",
]
