"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db

Foreign keys use the default NO ACTION rule: deleting a row that is still
referenced fails instead of cascading.
"""

from db.connection import Database
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Countries: a country is identified by its name
CREATE TABLE IF NOT EXISTS Country (
    cname           VARCHAR(50) PRIMARY KEY,
    population      BIGINT NOT NULL CHECK (population >= 0)
);

-- Disease types: surrogate key assigned by the server
CREATE TABLE IF NOT EXISTS DiseaseType (
    id              SERIAL PRIMARY KEY,
    description     VARCHAR(140) NOT NULL
);

-- Diseases: `id` is the disease type
CREATE TABLE IF NOT EXISTS Disease (
    disease_code    VARCHAR(50) PRIMARY KEY,
    pathogen        VARCHAR(20) NOT NULL,
    description     VARCHAR(140) NOT NULL,
    id              INT NOT NULL REFERENCES DiseaseType(id)
);

-- Users: salary and phone are optional
CREATE TABLE IF NOT EXISTS Users (
    email           VARCHAR(60) PRIMARY KEY,
    name            VARCHAR(30) NOT NULL,
    surname         VARCHAR(40) NOT NULL,
    salary          INT,
    phone           VARCHAR(20),
    cname           VARCHAR(50) NOT NULL REFERENCES Country(cname)
);

CREATE TABLE IF NOT EXISTS Patients (
    email           VARCHAR(60) PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS PublicServant (
    email           VARCHAR(60) PRIMARY KEY,
    department      VARCHAR(50) NOT NULL
);

CREATE TABLE IF NOT EXISTS Doctor (
    email           VARCHAR(60) PRIMARY KEY,
    degree          VARCHAR(20) NOT NULL
);

-- Which country first encountered which disease, and when
CREATE TABLE IF NOT EXISTS Discover (
    cname           VARCHAR(50) NOT NULL REFERENCES Country(cname),
    disease_code    VARCHAR(50) NOT NULL REFERENCES Disease(disease_code),
    first_enc_date  DATE NOT NULL,
    PRIMARY KEY (cname, disease_code)
);

-- Which doctor specializes in which disease type
CREATE TABLE IF NOT EXISTS Specialize (
    id              INT NOT NULL REFERENCES DiseaseType(id),
    email           VARCHAR(60) NOT NULL REFERENCES Doctor(email),
    PRIMARY KEY (id, email)
);

CREATE TABLE IF NOT EXISTS PatientDisease (
    email           VARCHAR(60) NOT NULL REFERENCES Patients(email),
    disease_code    VARCHAR(50) NOT NULL REFERENCES Disease(disease_code),
    PRIMARY KEY (email, disease_code)
);

-- Case counts filed by a public servant per country and disease
CREATE TABLE IF NOT EXISTS Record (
    email           VARCHAR(60) NOT NULL REFERENCES PublicServant(email),
    cname           VARCHAR(50) NOT NULL REFERENCES Country(cname),
    disease_code    VARCHAR(50) NOT NULL REFERENCES Disease(disease_code),
    total_deaths    INT NOT NULL CHECK (total_deaths >= 0),
    total_patients  INT NOT NULL CHECK (total_patients >= 0),
    PRIMARY KEY (email, cname, disease_code)
);
"""


def create_tables(database: Database) -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with database.transaction(entity="schema") as cur:
            cur.execute(SCHEMA_SQL)
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    with Database() as database:
        create_tables(database)
    print("Database schema created successfully.")
