"""
repositories/country_repo.py
----------------------------
Data access layer for countries.
"""

from models.country import Country
from repositories.base import EntityRepository


class CountryRepository(EntityRepository[Country]):
    """Repository for CRUD operations on the Country table."""

    entity = Country
    table = "Country"
    columns = {"name": "cname", "population": "population"}
    key_fields = ("name",)
    mutable_fields = ("population",)
