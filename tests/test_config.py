"""Settings validation: mandatory JWT secret, database URL assembly and rate-limit switch."""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from catalog.core.config import Settings
from tests.helpers import TEST_JWT_SECRET, make_settings


def _clean_env() -> dict[str, str]:
    """Environment without any setting this module checks."""
    names = {name.upper() for name in Settings.model_fields}
    return {k: v for k, v in os.environ.items() if k.upper() not in names}


class TestJwtSecretRequired(unittest.TestCase):
    """There is no fallback secret: startup fails without one."""

    def test_missing_secret_fails(self) -> None:
        with patch.dict(os.environ, _clean_env(), clear=True):
            with self.assertRaises(ValidationError) as ctx:
                Settings(_env_file=None)
        self.assertIn("JWT_SECRET", str(ctx.exception))

    def test_blank_secret_fails(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_SECRET="   ")

    def test_secret_from_environment(self) -> None:
        env = _clean_env()
        env["JWT_SECRET"] = TEST_JWT_SECRET
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), TEST_JWT_SECRET)
        self.assertEqual(settings.JWT_EXPIRE_MINUTES, 1440)


class TestDatabaseUrl(unittest.TestCase):
    def test_assembled_from_parts_when_url_unset(self) -> None:
        env = _clean_env()
        env.update(
            {
                "JWT_SECRET": TEST_JWT_SECRET,
                "DB_HOST": "db.internal",
                "DB_PORT": "6543",
                "DB_USER": "catalog",
                "DB_PASSWORD": "p@ss",
                "DB_NAME": "catalog_prod",
            }
        )
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)
        self.assertTrue(settings.DATABASE_URL.startswith("postgresql+psycopg2://catalog:"))
        self.assertIn("@db.internal:6543/catalog_prod", settings.DATABASE_URL)
        self.assertNotIn("p@ss@", settings.DATABASE_URL)

    def test_explicit_url_wins(self) -> None:
        settings = make_settings(DATABASE_URL="postgresql://u:p@host:5432/x", DB_HOST="ignored")
        self.assertEqual(settings.DATABASE_URL, "postgresql://u:p@host:5432/x")

    def test_unsupported_scheme_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://u:p@host/x")


class TestOtherSettings(unittest.TestCase):
    def test_rate_limit_never_active_in_test_env(self) -> None:
        self.assertFalse(make_settings(APP_ENV="test", RATE_LIMIT_ENABLED=True).rate_limit_active)
        self.assertTrue(make_settings(APP_ENV="dev", RATE_LIMIT_ENABLED=True).rate_limit_active)
        self.assertFalse(make_settings(APP_ENV="prod", RATE_LIMIT_ENABLED=False).rate_limit_active)

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_EXPIRE_MINUTES=0)
        with self.assertRaises(ValidationError):
            make_settings(JWT_EXPIRE_MINUTES=10081)

    def test_log_level_normalized(self) -> None:
        self.assertEqual(make_settings(LOG_LEVEL="debug").LOG_LEVEL, "DEBUG")
        with self.assertRaises(ValidationError):
            make_settings(LOG_LEVEL="chatty")

    def test_api_prefix_trailing_slash_stripped(self) -> None:
        self.assertEqual(make_settings(API_PREFIX="/api/").API_PREFIX, "/api")


if __name__ == "__main__":
    unittest.main()
