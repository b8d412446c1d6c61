"""
models/relations.py
-------------------
Relationship and fact rows. Each one is identified by a composite key made
of the keys of the entities it links.
"""

from dataclasses import dataclass
from datetime import date

from utils.validators import require_count, require_date, require_int, require_text


@dataclass
class Discover:
    """
    The date a disease was first encountered in a country.

    Key: (country_name, disease_code).
    """
    country_name: str
    disease_code: str
    first_encounter: date

    def validate(self) -> None:
        require_text(self.country_name, "country_name")
        require_text(self.disease_code, "disease_code")
        require_date(self.first_encounter, "first_encounter")


@dataclass
class Specialize:
    """Doctor specialization in a disease type. Key: (disease_type_id, doctor_email)."""
    disease_type_id: int
    doctor_email: str

    def validate(self) -> None:
        require_int(self.disease_type_id, "disease_type_id")
        require_text(self.doctor_email, "doctor_email")


@dataclass
class PatientDisease:
    patient_email: str
    disease_code: str

    def validate(self) -> None:
        require_text(self.patient_email, "patient_email")
        require_text(self.disease_code, "disease_code")


@dataclass
class Record:
    """
    Case counts for a disease in a country, filed by a public servant.

    Key: (public_servant_email, country_name, disease_code).
    Only the two totals can be updated.
    """
    public_servant_email: str
    country_name: str
    disease_code: str
    total_deaths: int
    total_patients: int

    def validate(self) -> None:
        require_text(self.public_servant_email, "public_servant_email")
        require_text(self.country_name, "country_name")
        require_text(self.disease_code, "disease_code")
        require_count(self.total_deaths, "total_deaths")
        require_count(self.total_patients, "total_patients")
