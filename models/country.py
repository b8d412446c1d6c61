"""
models/country.py
-----------------
Domain model for countries.
"""

from dataclasses import dataclass

from utils.validators import require_count, require_text


@dataclass
class Country:
    """
    A country tracked by the registry.

    Attributes:
        name: Country name, unique.
        population: Number of inhabitants (>= 0).
    """
    name: str
    population: int

    def validate(self) -> None:
        require_text(self.name, "name")
        require_count(self.population, "population")

    def __str__(self) -> str:
        return f"{self.name} (population {self.population:,})"
