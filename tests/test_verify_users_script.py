"""Unit tests for the verify_users CLI: exit code follows the batch error count."""

import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from sakuraboard.schemas.admin import VerificationSummary
from sakuraboard.scripts import verify_users


class TestVerifyUsersMain(unittest.TestCase):
    @patch("sakuraboard.scripts.verify_users.SessionLocal")
    @patch("sakuraboard.scripts.verify_users.verify_all_users", new_callable=AsyncMock)
    def test_clean_run_exits_zero(self, mock_verify: AsyncMock, mock_session: MagicMock) -> None:
        mock_verify.return_value = VerificationSummary(checked=3, updated=1, errors=0)
        self.assertEqual(verify_users.main(), 0)
        mock_verify.assert_awaited_once()
        mock_session.return_value.close.assert_called_once()

    @patch("sakuraboard.scripts.verify_users.SessionLocal")
    @patch("sakuraboard.scripts.verify_users.verify_all_users", new_callable=AsyncMock)
    def test_lookup_errors_exit_one(self, mock_verify: AsyncMock, mock_session: MagicMock) -> None:
        mock_verify.return_value = VerificationSummary(checked=3, updated=0, errors=2)
        self.assertEqual(verify_users.main(), 1)

    @patch("sakuraboard.scripts.verify_users.SessionLocal")
    @patch("sakuraboard.scripts.verify_users.verify_all_users", new_callable=AsyncMock)
    def test_crash_exits_one_and_closes_session(
        self, mock_verify: AsyncMock, mock_session: MagicMock
    ) -> None:
        mock_verify.side_effect = RuntimeError("boom")
        self.assertEqual(verify_users.main(), 1)
        mock_session.return_value.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
