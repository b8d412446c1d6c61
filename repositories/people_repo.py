"""
repositories/people_repo.py
---------------------------
Data access layer for doctors, patients, public servants and users.
All four tables are keyed by email.
"""

from models.people import Doctor, Patient, PublicServant, User
from repositories.base import EntityRepository


class DoctorRepository(EntityRepository[Doctor]):
    entity = Doctor
    table = "Doctor"
    columns = {"email": "email", "degree": "degree"}
    key_fields = ("email",)
    mutable_fields = ("degree",)


class PatientRepository(EntityRepository[Patient]):
    # a patient is only an email; update() just reports whether it exists
    entity = Patient
    table = "Patients"
    columns = {"email": "email"}
    key_fields = ("email",)


class PublicServantRepository(EntityRepository[PublicServant]):
    entity = PublicServant
    table = "PublicServant"
    columns = {"email": "email", "department": "department"}
    key_fields = ("email",)
    mutable_fields = ("department",)


class UserRepository(EntityRepository[User]):
    """Users carry the two optional columns (salary, phone); NULL maps to None."""

    entity = User
    table = "Users"
    columns = {
        "email": "email",
        "name": "name",
        "surname": "surname",
        "salary": "salary",
        "phone": "phone",
        "country_name": "cname",
    }
    key_fields = ("email",)
    mutable_fields = ("name", "surname", "salary", "phone", "country_name")
