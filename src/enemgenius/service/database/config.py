"""RavenDB connection settings read from the environment."""

import os

from dotenv import load_dotenv

from enemgenius.constants import DEFAULT_RAVENDB_DATABASE, DEFAULT_RAVENDB_URL

load_dotenv()


class RavenDBConfig:
    """Where knowledge files, questions and exams are stored.

    RAVENDB_URL and RAVENDB_DATABASE override the local defaults.
    """

    @staticmethod
    def get_url() -> str:
        return os.getenv("RAVENDB_URL", DEFAULT_RAVENDB_URL)

    @staticmethod
    def get_database_name() -> str:
        return os.getenv("RAVENDB_DATABASE", DEFAULT_RAVENDB_DATABASE)

    @classmethod
    def resolve(cls, url: str | None = None, database: str | None = None) -> tuple[str, str]:
        """Fill in whichever of url and database the caller left out."""
        return url or cls.get_url(), database or cls.get_database_name()
