"""
Tests for settings defaults and the password hashing context built from them.
"""

from passlib.context import CryptContext

from healthmap.core.config import Settings, settings
from healthmap.core.security import get_password_hash


class TestSettingsDefaults:
    def test_default_cost_factor_and_password_minimum(self, monkeypatch):
        monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
        monkeypatch.delenv("PASSWORD_MIN_LENGTH", raising=False)

        defaults = Settings(_env_file=None)

        assert defaults.BCRYPT_ROUNDS == 12
        assert defaults.PASSWORD_MIN_LENGTH == 6
        assert defaults.API_PREFIX == "/api"

    def test_default_cost_factor_is_written_into_hashes(self, monkeypatch):
        monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
        defaults = Settings(_env_file=None)
        context = CryptContext(schemes=["bcrypt"], bcrypt__rounds=defaults.BCRYPT_ROUNDS)

        assert context.hash("secret1").startswith("$2b$12$")

    def test_hashing_follows_configured_rounds(self):
        assert get_password_hash("secret1").startswith(f"$2b${settings.BCRYPT_ROUNDS:02d}$")

    def test_derives_postgres_uri(self, monkeypatch):
        monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)

        configured = Settings(
            _env_file=None,
            POSTGRES_SERVER="db",
            POSTGRES_USER="health",
            POSTGRES_PASSWORD="p@ss",
            POSTGRES_DB="healthmap",
        )

        assert configured.SQLALCHEMY_DATABASE_URI == "postgresql://health:p%40ss@db:5432/healthmap"
        assert not configured.is_sqlite
