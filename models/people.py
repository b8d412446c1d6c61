"""
models/people.py
----------------
Domain models for the people stored in the registry.
All of them are identified by their email address.
"""

from dataclasses import dataclass
from typing import Optional

from utils.validators import (
    require_optional_int,
    require_optional_text,
    require_text,
)


@dataclass
class Doctor:
    email: str
    degree: str

    def validate(self) -> None:
        require_text(self.email, "email")
        require_text(self.degree, "degree")


@dataclass
class Patient:
    email: str

    def validate(self) -> None:
        require_text(self.email, "email")


@dataclass
class PublicServant:
    """A public servant files case-count records for a department."""
    email: str
    department: str

    def validate(self) -> None:
        require_text(self.email, "email")
        require_text(self.department, "department")


@dataclass
class User:
    """
    A registered user.

    Attributes:
        email: Unique email address.
        name: First name.
        surname: Last name.
        country_name: Country the user lives in.
        salary: Optional salary. None means not recorded, which is not the same as 0.
        phone: Optional phone number. None means not recorded; never an empty string.
    """
    email: str
    name: str
    surname: str
    country_name: str
    salary: Optional[int] = None
    phone: Optional[str] = None

    def validate(self) -> None:
        require_text(self.email, "email")
        require_text(self.name, "name")
        require_text(self.surname, "surname")
        require_text(self.country_name, "country_name")
        require_optional_int(self.salary, "salary")
        require_optional_text(self.phone, "phone")
