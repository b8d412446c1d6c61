"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive raw data from the database and return domain model objects.

Repositories share one ``Database`` handle, passed in at construction;
``build_repositories`` wires all of them at once.
"""

from dataclasses import dataclass, fields

from db.connection import Database
from repositories.base import EntityRepository
from repositories.country_repo import CountryRepository
from repositories.disease_repo import DiseaseRepository, DiseaseTypeRepository
from repositories.people_repo import (
    DoctorRepository,
    PatientRepository,
    PublicServantRepository,
    UserRepository,
)
from repositories.relation_repo import (
    DiscoverRepository,
    PatientDiseaseRepository,
    RecordRepository,
    SpecializeRepository,
)


@dataclass
class Repositories:
    """One repository per table, all bound to the same database."""
    countries: CountryRepository
    disease_types: DiseaseTypeRepository
    diseases: DiseaseRepository
    doctors: DoctorRepository
    patients: PatientRepository
    public_servants: PublicServantRepository
    users: UserRepository
    discovers: DiscoverRepository
    specializes: SpecializeRepository
    patient_diseases: PatientDiseaseRepository
    records: RecordRepository

    def summary(self) -> dict[str, int]:
        """Row count per table, keyed by attribute name."""
        return {f.name: getattr(self, f.name).count() for f in fields(self)}


def build_repositories(database: Database) -> Repositories:
    return Repositories(
        countries=CountryRepository(database),
        disease_types=DiseaseTypeRepository(database),
        diseases=DiseaseRepository(database),
        doctors=DoctorRepository(database),
        patients=PatientRepository(database),
        public_servants=PublicServantRepository(database),
        users=UserRepository(database),
        discovers=DiscoverRepository(database),
        specializes=SpecializeRepository(database),
        patient_diseases=PatientDiseaseRepository(database),
        records=RecordRepository(database),
    )


__all__ = [
    "EntityRepository",
    "Repositories",
    "build_repositories",
    "CountryRepository",
    "DiseaseTypeRepository",
    "DiseaseRepository",
    "DoctorRepository",
    "PatientRepository",
    "PublicServantRepository",
    "UserRepository",
    "DiscoverRepository",
    "SpecializeRepository",
    "PatientDiseaseRepository",
    "RecordRepository",
]
