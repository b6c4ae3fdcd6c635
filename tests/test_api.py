"""HTTP tests: credential gate, login callback, admin user management, board gating, tuner exam."""

import unittest
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlparse

from fastapi.testclient import TestClient

from fakes import ADMIN_ROLE, OTHER_ROLE, FakeDiscord, add_user, make_config, make_session_factory

from sakuraboard.api.v1.auth import get_discord_client
from sakuraboard.core.config import get_access_config
from sakuraboard.core.database import get_db
from sakuraboard.core.security import decode_session_token, issue_session_token
from sakuraboard.main import app
from sakuraboard.models import WebsiteUser
from sakuraboard.services.discord_client import DiscordApiError, DiscordNotFoundError


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.config = make_config()
        self.discord = FakeDiscord()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_discord_client] = lambda: self.discord
        app.dependency_overrides[get_access_config] = lambda: self.config
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def seed(
        self,
        user_id: str,
        role: str = "viewer",
        status: str = "pending",
        discord_roles: list[str] | None = None,
        now: datetime | None = None,
        **kwargs: object,
    ) -> str:
        """Store a user and return a valid credential for them."""
        with self.Session() as db:
            user = add_user(db, user_id, role=role, status=status, discord_roles=discord_roles, **kwargs)
            return issue_session_token(user, True, self.config, now=now).token

    def stored(self, user_id: str) -> WebsiteUser | None:
        with self.Session() as db:
            user = db.get(WebsiteUser, user_id)
            if user is not None:
                db.expunge(user)
            return user

    def update_stored(self, user_id: str, **values: object) -> None:
        with self.Session() as db:
            user = db.get(WebsiteUser, user_id)
            for key, value in values.items():
                setattr(user, key, value)
            db.commit()

    @staticmethod
    def auth(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class TestHealth(ApiTestCase):
    def test_reports_database_and_discord(self) -> None:
        resp = self.client.get("/api/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "status": "ok",
                "environment": "dev",
                "database": "connected",
                "discord_configured": True,
            },
        )

    def test_missing_bot_token(self) -> None:
        self.config = make_config(bot_token="")
        self.assertFalse(self.client.get("/api/health/").json()["discord_configured"])


class TestCredentialGate(ApiTestCase):
    """Missing credential -> 401; present but invalid -> 403."""

    def test_missing_credential(self) -> None:
        resp = self.client.get("/api/users/me")
        self.assertEqual(resp.status_code, 401)

    def test_garbage_credential(self) -> None:
        resp = self.client.get("/api/users/me", headers=self.auth("not-a-token"))
        self.assertEqual(resp.status_code, 403)

    def test_expired_credential(self) -> None:
        token = self.seed("u1", now=datetime.now(UTC) - timedelta(days=31))
        resp = self.client.get("/api/users/me", headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_wrong_secret(self) -> None:
        with self.Session() as db:
            user = add_user(db, "u1")
            token = issue_session_token(user, True, make_config(jwt_secret="elsewhere")).token
        resp = self.client.get("/api/users/me", headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_cookie_credential_accepted(self) -> None:
        token = self.seed("u1", discord_roles=[OTHER_ROLE])
        self.discord.members["u1"] = [OTHER_ROLE]
        self.client.cookies.set("token", token)
        resp = self.client.get("/api/users/me")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["id"], "u1")

    def test_rejected_user_loses_access(self) -> None:
        token = self.seed("u1", role="editor", status="approved")
        with self.Session() as db:
            db.delete(db.get(WebsiteUser, "u1"))
            db.commit()
        resp = self.client.get("/api/board", headers=self.auth(token))
        self.assertEqual(resp.status_code, 401)


class TestStoredRoleIsAuthoritative(ApiTestCase):
    """The role snapshot inside the credential is never trusted for privilege checks."""

    def test_stale_admin_snapshot_rejected(self) -> None:
        token = self.seed("u1", role="admin", status="approved")
        self.update_stored("u1", website_role="viewer", status="pending")
        resp = self.client.get("/api/admin/users", headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_stale_viewer_snapshot_does_not_block_admin(self) -> None:
        token = self.seed("u1", role="viewer", status="pending")
        self.update_stored("u1", website_role="admin", status="approved")
        resp = self.client.get("/api/admin/users", headers=self.auth(token))
        self.assertEqual(resp.status_code, 200)


class TestMe(ApiTestCase):
    def test_reresolves_and_persists(self) -> None:
        token = self.seed("u1", role="editor", status="approved")
        self.discord.members["u1"] = [OTHER_ROLE, ADMIN_ROLE]

        resp = self.client.get("/api/users/me", headers=self.auth(token))

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["role"], "admin")
        self.assertEqual(body["status"], "approved")
        self.assertEqual(body["memberRoles"], [OTHER_ROLE, ADMIN_ROLE])
        self.assertTrue(body["inGuild"])
        stored = self.stored("u1")
        self.assertEqual((stored.website_role, stored.status), ("admin", "approved"))

    def test_admin_who_left_guild_is_demoted(self) -> None:
        token = self.seed("u9", role="admin", status="approved", discord_roles=[ADMIN_ROLE])

        resp = self.client.get("/api/users/me", headers=self.auth(token))

        body = resp.json()
        self.assertEqual((body["role"], body["status"]), ("viewer", "pending"))
        self.assertFalse(body["inGuild"])
        self.assertEqual(body["memberRoles"], [])
        resp = self.client.get("/api/admin/users", headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_discord_failure_returns_stored_values(self) -> None:
        token = self.seed("u1", role="admin", status="approved", discord_roles=[ADMIN_ROLE])
        self.discord.members["u1"] = DiscordApiError("Guild member lookup: rate limited.", 429)

        resp = self.client.get("/api/users/me", headers=self.auth(token))

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual((body["role"], body["status"]), ("admin", "approved"))
        self.assertIsNone(body["inGuild"])
        self.assertEqual(body["memberRoles"], [ADMIN_ROLE])

    def test_permissions_reported(self) -> None:
        token = self.seed("u1", role="editor", status="approved", can_delete_cards=False)
        self.discord.members["u1"] = []
        body = self.client.get("/api/users/me", headers=self.auth(token)).json()
        self.assertEqual(body["permissions"], {"canDeleteColumns": True, "canDeleteCards": False})


class TestLogin(ApiTestCase):
    def callback(self, state: str | None = "stayIn", code: str | None = "code-1"):
        params = {}
        if code is not None:
            params["code"] = code
        if state is not None:
            params["state"] = state
        return self.client.get(
            "/api/auth/discord/callback", params=params, follow_redirects=False
        )

    def test_login_redirect_carries_state(self) -> None:
        resp = self.client.get(
            "/api/auth/discord",
            params={"stayLoggedIn": "false", "tuner": "true"},
            follow_redirects=False,
        )
        self.assertEqual(resp.status_code, 307)
        query = parse_qs(urlparse(resp.headers["location"]).query)
        self.assertEqual(query["state"], ["noStay_tuner"])

    def test_login_defaults_to_stay_logged_in(self) -> None:
        resp = self.client.get("/api/auth/discord", follow_redirects=False)
        query = parse_qs(urlparse(resp.headers["location"]).query)
        self.assertEqual(query["state"], ["stayIn"])

    def test_callback_requires_code(self) -> None:
        self.assertEqual(self.callback(code=None).status_code, 400)

    def test_first_login_creates_pending_viewer(self) -> None:
        self.discord.members["u1"] = [OTHER_ROLE]

        resp = self.callback()

        self.assertEqual(resp.status_code, 307)
        location = resp.headers["location"]
        self.assertTrue(location.startswith("http://frontend.test?token="))
        token = parse_qs(urlparse(location).query)["token"][0]
        payload = decode_session_token(token, self.config)
        self.assertEqual(payload["sub"], "u1")
        self.assertEqual(payload["role"], "viewer")
        self.discord.exchange_code.assert_awaited_once_with("code-1")

        cookie = resp.headers["set-cookie"]
        self.assertIn(f"token={token}", cookie)
        self.assertIn("HttpOnly", cookie)
        self.assertIn("Max-Age=2592000", cookie)

        stored = self.stored("u1")
        self.assertEqual((stored.website_role, stored.status), ("viewer", "pending"))
        self.assertEqual(stored.username, "sakura")

    def test_short_session_cookie_has_no_max_age(self) -> None:
        self.discord.members["u1"] = []
        resp = self.callback(state="noStay")
        self.assertNotIn("Max-Age", resp.headers["set-cookie"])
        token = parse_qs(urlparse(resp.headers["location"]).query)["token"][0]
        payload = decode_session_token(token, self.config)
        self.assertLessEqual(payload["exp"] - payload["iat"], 12 * 3600)

    def test_unknown_state_is_short_session(self) -> None:
        self.discord.members["u1"] = []
        resp = self.callback(state=None)
        self.assertNotIn("Max-Age", resp.headers["set-cookie"])

    def test_tuner_state_redirects_to_tuner_frontend(self) -> None:
        self.discord.members["u1"] = []
        resp = self.callback(state="stayIn_tuner")
        self.assertTrue(resp.headers["location"].startswith("http://tuner.test?token="))

    def test_admin_role_at_login(self) -> None:
        self.discord.members["u1"] = [ADMIN_ROLE]
        self.callback()
        stored = self.stored("u1")
        self.assertEqual((stored.website_role, stored.status), ("admin", "approved"))

    def test_guild_lookup_failure_keeps_stored_role(self) -> None:
        self.seed("u1", role="editor", status="approved", username="old-name")
        self.discord.members["u1"] = DiscordApiError("Guild member lookup: rate limited.", 429)

        resp = self.callback()

        self.assertIn("token=", resp.headers["location"])
        stored = self.stored("u1")
        self.assertEqual((stored.website_role, stored.status), ("editor", "approved"))
        self.assertEqual(stored.username, "sakura")

    def test_oauth_failure_redirects_with_error(self) -> None:
        self.discord.exchange_code.side_effect = DiscordApiError("Token exchange: bad code.", 400)
        resp = self.callback()
        self.assertEqual(resp.status_code, 307)
        self.assertEqual(resp.headers["location"], "http://frontend.test?error=oauth_failed")
        self.assertNotIn("set-cookie", resp.headers)

    def test_logout_clears_cookie(self) -> None:
        resp = self.client.post("/api/auth/logout")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"success": True})
        cookie = resp.headers["set-cookie"]
        self.assertIn("token=", cookie)
        self.assertIn("Max-Age=0", cookie)


class TestAdminUsers(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin_token = self.seed("a1", role="admin", status="approved", discord_roles=[ADMIN_ROLE])
        self.discord.members["a1"] = [ADMIN_ROLE]

    def test_requires_admin(self) -> None:
        token = self.seed("u2", role="editor", status="approved")
        resp = self.client.get("/api/admin/users", headers=self.auth(token))
        self.assertEqual(resp.status_code, 403)

    def test_list_users(self) -> None:
        self.seed("u2")
        resp = self.client.get("/api/admin/users", headers=self.auth(self.admin_token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual({u["user_id"] for u in resp.json()}, {"a1", "u2"})

    def test_approve_as_editor_with_permissions(self) -> None:
        self.seed("u2")
        resp = self.client.post(
            "/api/admin/users/u2",
            json={"status": "approved", "website_role": "editor", "can_delete_columns": False},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 200)
        stored = self.stored("u2")
        self.assertEqual((stored.website_role, stored.status), ("editor", "approved"))
        self.assertFalse(stored.can_delete_columns)
        self.assertTrue(stored.can_delete_cards)

    def test_invalid_role_rejected(self) -> None:
        self.seed("u2")
        resp = self.client.post(
            "/api/admin/users/u2",
            json={"status": "approved", "website_role": "owner"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 422)

    def test_admin_grant_requires_discord_role(self) -> None:
        self.seed("u2", role="editor", status="approved")
        self.discord.members["u2"] = [OTHER_ROLE]
        resp = self.client.post(
            "/api/admin/users/u2",
            json={"status": "approved", "website_role": "admin"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.stored("u2").website_role, "editor")

    def test_admin_grant_with_discord_role(self) -> None:
        self.seed("u2", role="viewer", status="pending")
        self.discord.members["u2"] = [ADMIN_ROLE]
        resp = self.client.post(
            "/api/admin/users/u2",
            json={"status": "approved", "website_role": "admin"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 200)
        stored = self.stored("u2")
        self.assertEqual((stored.website_role, stored.status), ("admin", "approved"))

    def test_admin_grant_discord_unavailable(self) -> None:
        self.seed("u2")
        self.discord.members["u2"] = DiscordApiError("Guild member lookup: Discord timed out.")
        resp = self.client.post(
            "/api/admin/users/u2",
            json={"status": "approved", "website_role": "admin"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 502)

    def test_update_unknown_user(self) -> None:
        resp = self.client.post(
            "/api/admin/users/nobody",
            json={"status": "approved", "website_role": "viewer"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 404)

    def test_verify_all(self) -> None:
        self.seed("u2")
        self.seed("u3", role="editor", status="approved")
        self.discord.members["u2"] = [ADMIN_ROLE]
        self.discord.members["u3"] = DiscordApiError("Guild member lookup: rate limited.", 429)

        resp = self.client.post("/api/admin/users/verify-all", headers=self.auth(self.admin_token))

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"checked": 3, "updated": 1, "errors": 1})
        self.assertEqual(self.stored("u2").website_role, "admin")
        self.assertEqual(self.stored("u3").website_role, "editor")

    def test_revoke(self) -> None:
        self.seed("u2", role="editor", status="approved")
        resp = self.client.post("/api/admin/users/u2/revoke", headers=self.auth(self.admin_token))
        self.assertEqual(resp.status_code, 200)
        stored = self.stored("u2")
        self.assertEqual((stored.website_role, stored.status), ("viewer", "pending"))

    def test_reject_deletes_record(self) -> None:
        token = self.seed("u2")
        resp = self.client.delete("/api/admin/users/u2", headers=self.auth(self.admin_token))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self.stored("u2"))
        self.assertEqual(self.client.get("/api/board", headers=self.auth(token)).status_code, 401)


class TestAdminGuild(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin_token = self.seed("a1", role="admin", status="approved", discord_roles=[ADMIN_ROLE])

    def test_member_list(self) -> None:
        self.discord.list_guild_members.return_value = [
            {"user": {"id": "10", "username": "hana", "global_name": "Hana"}, "roles": [1, 2]},
            {"user": {}, "roles": []},
        ]
        resp = self.client.get("/api/admin/guild/members", headers=self.auth(self.admin_token))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["members"][0]["id"], "10")
        self.assertEqual(body["members"][0]["roles"], ["1", "2"])

    def test_timeout(self) -> None:
        until = datetime(2026, 10, 1, 13, 0, tzinfo=UTC)
        self.discord.timeout_member.return_value = until
        resp = self.client.post(
            "/api/admin/guild/members/u5/timeout",
            json={"minutes": 60, "reason": "spam"},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["action"], "timeout")
        self.discord.timeout_member.assert_awaited_once_with("u5", 60, reason="spam")

    def test_timeout_out_of_range(self) -> None:
        resp = self.client.post(
            "/api/admin/guild/members/u5/timeout",
            json={"minutes": 0},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 422)
        self.discord.timeout_member.assert_not_awaited()

    def test_kick_unknown_member(self) -> None:
        self.discord.kick_member.side_effect = DiscordNotFoundError("Member kick: not found.", 404)
        resp = self.client.post(
            "/api/admin/guild/members/u5/kick", json={}, headers=self.auth(self.admin_token)
        )
        self.assertEqual(resp.status_code, 404)

    def test_ban_discord_failure(self) -> None:
        self.discord.ban_member.side_effect = DiscordApiError("Member ban: Discord returned 500.", 500)
        resp = self.client.post(
            "/api/admin/guild/members/u5/ban",
            json={"reason": "raid", "delete_message_seconds": 3600},
            headers=self.auth(self.admin_token),
        )
        self.assertEqual(resp.status_code, 502)
        self.discord.ban_member.assert_awaited_once_with(
            "u5", reason="raid", delete_message_seconds=3600
        )


class TestBoardApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.seed("a1", role="admin", status="approved")
        self.editor = self.seed("u7", role="editor", status="approved")
        self.other_editor = self.seed("u8", role="editor", status="approved", can_delete_cards=False)
        self.viewer = self.seed("v1", role="viewer", status="approved")
        self.pending = self.seed("p1", role="editor", status="pending")

        resp = self.client.post(
            "/api/board/columns", json={"id": "todo", "title": "To do"}, headers=self.auth(self.admin)
        )
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post(
            "/api/board/cards",
            json={"id": "c1", "columnId": "todo", "title": "Restricted", "allowedEditorIds": ["u7"]},
            headers=self.auth(self.admin),
        )
        self.assertEqual(resp.status_code, 201)

    def test_pending_user_has_no_board(self) -> None:
        self.assertEqual(self.client.get("/api/board", headers=self.auth(self.pending)).status_code, 403)

    def test_viewer_reads_but_cannot_write(self) -> None:
        resp = self.client.get("/api/board", headers=self.auth(self.viewer))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["columns"][0]["cardIds"], ["c1"])
        resp = self.client.post(
            "/api/board/cards",
            json={"id": "c2", "columnId": "todo", "title": "Nope"},
            headers=self.auth(self.viewer),
        )
        self.assertEqual(resp.status_code, 403)

    def test_editor_allow_list(self) -> None:
        body = {"title": "Edited"}
        resp = self.client.put("/api/board/cards/c1", json=body, headers=self.auth(self.other_editor))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.put("/api/board/cards/c1", json=body, headers=self.auth(self.editor))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "Edited")

    def test_delete_needs_permission_flag(self) -> None:
        self.client.post(
            "/api/board/cards",
            json={"id": "c2", "columnId": "todo", "title": "Open"},
            headers=self.auth(self.admin),
        )
        resp = self.client.delete("/api/board/cards/c2", headers=self.auth(self.other_editor))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.delete("/api/board/cards/c2", headers=self.auth(self.editor))
        self.assertEqual(resp.status_code, 200)

    def test_hidden_card_not_listed(self) -> None:
        self.client.post(
            "/api/board/cards",
            json={"id": "c3", "columnId": "todo", "title": "Secret", "allowedViewerIds": ["v1"]},
            headers=self.auth(self.admin),
        )
        ids = [c["id"] for c in self.client.get("/api/board", headers=self.auth(self.editor)).json()["cards"]]
        self.assertEqual(ids, ["c1"])
        ids = [c["id"] for c in self.client.get("/api/board", headers=self.auth(self.viewer)).json()["cards"]]
        self.assertEqual(ids, ["c1", "c3"])

    def test_move_card(self) -> None:
        self.client.post(
            "/api/board/columns", json={"id": "done", "title": "Done"}, headers=self.auth(self.admin)
        )
        resp = self.client.put(
            "/api/board/cards/c1/move",
            json={"columnId": "done", "sortOrder": 0},
            headers=self.auth(self.editor),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["columnId"], "done")

    def test_unknown_card_is_404(self) -> None:
        resp = self.client.put("/api/board/cards/nope", json={"title": "x"}, headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 404)

    def test_path_and_body_id_must_match(self) -> None:
        resp = self.client.put(
            "/api/board/cards/c1", json={"id": "c9", "title": "x"}, headers=self.auth(self.admin)
        )
        self.assertEqual(resp.status_code, 422)

    def test_unknown_tag_is_422(self) -> None:
        resp = self.client.put(
            "/api/board/cards/c1", json={"tagIds": ["ghost"]}, headers=self.auth(self.admin)
        )
        self.assertEqual(resp.status_code, 422)

    def test_column_delete_permission(self) -> None:
        self.update_stored("u8", can_delete_columns=False)
        resp = self.client.delete("/api/board/columns/todo", headers=self.auth(self.other_editor))
        self.assertEqual(resp.status_code, 403)
        resp = self.client.delete("/api/board/columns/todo", headers=self.auth(self.editor))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/board", headers=self.auth(self.admin)).json()["cards"], [])


class TestTunerExamApi(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.seed("a1", role="admin", status="approved")
        self.candidate = self.seed("t1")
        self.answers = {"q1": ["b"], "q2": ["a", "c"]}

    def submit(self):
        return self.client.post(
            "/api/tuner-exam/submit",
            json={"answers": self.answers, "ausbilder": "Yuki", "score": 7},
            headers=self.auth(self.candidate),
        )

    def test_full_flow(self) -> None:
        resp = self.client.get("/api/tuner-exam/status", headers=self.auth(self.candidate))
        self.assertEqual(resp.json(), {"status": "locked", "score": None})
        self.assertEqual(self.submit().status_code, 409)

        resp = self.client.post("/api/admin/tuner-exams/t1/unlock", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        status_body = self.client.get("/api/tuner-exam/status", headers=self.auth(self.candidate)).json()
        self.assertEqual(status_body["status"], "unlocked")

        resp = self.submit()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "submitted", "score": 7})
        self.assertEqual(self.submit().status_code, 409)

        records = self.client.get("/api/admin/tuner-exams", headers=self.auth(self.admin)).json()
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0]["answers"], self.answers)
        self.assertEqual(records[0]["ausbilder"], "Yuki")

        resp = self.client.post("/api/admin/tuner-exams/t1/unlock", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 409)

        resp = self.client.delete("/api/admin/tuner-exams/t1", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 200)
        status_body = self.client.get("/api/tuner-exam/status", headers=self.auth(self.candidate)).json()
        self.assertEqual(status_body["status"], "locked")

    def test_unlock_requires_admin(self) -> None:
        self.client.get("/api/tuner-exam/status", headers=self.auth(self.candidate))
        resp = self.client.post("/api/admin/tuner-exams/t1/unlock", headers=self.auth(self.candidate))
        self.assertEqual(resp.status_code, 403)

    def test_unlock_unknown_exam(self) -> None:
        resp = self.client.post("/api/admin/tuner-exams/ghost/unlock", headers=self.auth(self.admin))
        self.assertEqual(resp.status_code, 404)


if __name__ == "__main__":
    unittest.main()
