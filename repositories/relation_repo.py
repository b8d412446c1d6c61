"""
repositories/relation_repo.py
-----------------------------
Data access layer for the relationship tables.

Keys here are composite. Changing any key component goes through
``replace()``, which swaps the row atomically; ``update()`` only rewrites
the non-key columns.
"""

from models.relations import Discover, PatientDisease, Record, Specialize
from repositories.base import EntityRepository


class DiscoverRepository(EntityRepository[Discover]):
    entity = Discover
    table = "Discover"
    columns = {
        "country_name": "cname",
        "disease_code": "disease_code",
        "first_encounter": "first_enc_date",
    }
    key_fields = ("country_name", "disease_code")
    mutable_fields = ("first_encounter",)


class SpecializeRepository(EntityRepository[Specialize]):
    entity = Specialize
    table = "Specialize"
    columns = {"disease_type_id": "id", "doctor_email": "email"}
    key_fields = ("disease_type_id", "doctor_email")


class PatientDiseaseRepository(EntityRepository[PatientDisease]):
    entity = PatientDisease
    table = "PatientDisease"
    columns = {"patient_email": "email", "disease_code": "disease_code"}
    key_fields = ("patient_email", "disease_code")


class RecordRepository(EntityRepository[Record]):
    """Case counts; only total_deaths and total_patients are mutable."""

    entity = Record
    table = "Record"
    columns = {
        "public_servant_email": "email",
        "country_name": "cname",
        "disease_code": "disease_code",
        "total_deaths": "total_deaths",
        "total_patients": "total_patients",
    }
    key_fields = ("public_servant_email", "country_name", "disease_code")
    mutable_fields = ("total_deaths", "total_patients")
