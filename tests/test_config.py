"""Unit tests for sakuraboard.core.config: admin role list parsing and the frozen access config."""

import dataclasses
import unittest
from datetime import timedelta

from pydantic import ValidationError

from sakuraboard.core.config import DEFAULT_ADMIN_ROLE_IDS, Settings


def _settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, DATABASE_URL="sqlite://", **overrides)


class TestAdminRoleIds(unittest.TestCase):
    def test_default_list(self) -> None:
        self.assertEqual(_settings().ADMIN_ROLE_IDS, DEFAULT_ADMIN_ROLE_IDS)

    def test_comma_separated(self) -> None:
        s = _settings(ADMIN_ROLE_IDS=" 111, 222 ,,333")
        self.assertEqual(s.ADMIN_ROLE_IDS, ("111", "222", "333"))

    def test_json_list(self) -> None:
        s = _settings(ADMIN_ROLE_IDS='["111", 222]')
        self.assertEqual(s.ADMIN_ROLE_IDS, ("111", "222"))

    def test_empty_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(ADMIN_ROLE_IDS=" , ")


class TestValidation(unittest.TestCase):
    def test_postgres_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Settings(_env_file=None, DATABASE_URL="postgresql://localhost/db")

    def test_frontend_url_trailing_slash_stripped(self) -> None:
        self.assertEqual(_settings(FRONTEND_URL="https://board.test/").FRONTEND_URL, "https://board.test")

    def test_session_hours_bounded(self) -> None:
        with self.assertRaises(ValidationError):
            _settings(SESSION_DEFAULT_HOURS=0)


class TestAccessConfig(unittest.TestCase):
    def test_snapshot_values(self) -> None:
        config = _settings(
            ADMIN_ROLE_IDS="111,222",
            DISCORD_GUILD_ID="guild-9",
            JWT_SECRET="s3cret",
            SESSION_DEFAULT_HOURS=6,
            SESSION_LONG_LIVED_DAYS=14,
        ).access_config()
        self.assertEqual(config.admin_role_ids, frozenset({"111", "222"}))
        self.assertEqual(config.guild_id, "guild-9")
        self.assertEqual(config.jwt_secret, "s3cret")
        self.assertEqual(config.session_default_lifetime, timedelta(hours=6))
        self.assertEqual(config.session_long_lived_lifetime, timedelta(days=14))

    def test_immutable(self) -> None:
        config = _settings().access_config()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.guild_id = "other"  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
