"""Unit tests for sakuraboard.services.access_control: per-card view/edit/delete predicates."""

import unittest
from types import SimpleNamespace

from sakuraboard.services.access_control import (
    can_delete_card,
    can_delete_column,
    can_edit,
    can_edit_board,
    can_view,
    is_admin,
    visible_cards,
)


def _user(
    user_id: str = "u1",
    role: str = "editor",
    status: str = "approved",
    can_delete_columns: bool = True,
    can_delete_cards: bool = True,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id,
        role=role,
        status=status,
        can_delete_columns=can_delete_columns,
        can_delete_cards=can_delete_cards,
    )


def _card(viewers: list[str] | None = None, editors: list[str] | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        id="c1",
        allowed_viewer_ids=viewers if viewers is not None else [],
        allowed_editor_ids=editors if editors is not None else [],
    )


class TestCanView(unittest.TestCase):
    """can_view: approved users see unrestricted cards; allow-lists narrow; admin bypasses."""

    def test_admin_sees_every_card(self) -> None:
        admin = _user("a1", role="admin")
        for card in (_card(), _card(viewers=["u2"]), _card(viewers=["u2"], editors=["u3"])):
            self.assertTrue(can_view(admin, card))

    def test_empty_allow_list_visible_to_approved_non_admins(self) -> None:
        card = _card()
        for role in ("editor", "viewer"):
            self.assertTrue(can_view(_user(role=role), card))

    def test_pending_users_see_nothing(self) -> None:
        card = _card()
        for role in ("admin", "editor", "viewer"):
            self.assertFalse(can_view(_user(role=role, status="pending"), card))

    def test_allow_list_restricts(self) -> None:
        card = _card(viewers=["u2"])
        self.assertTrue(can_view(_user("u2", role="viewer"), card))
        self.assertFalse(can_view(_user("u3", role="editor"), card))

    def test_no_user(self) -> None:
        self.assertFalse(can_view(None, _card()))


class TestCanEdit(unittest.TestCase):
    """can_edit: viewers never edit; editor allow-list narrows; admin bypasses."""

    def test_viewer_never_edits(self) -> None:
        viewer = _user("u1", role="viewer")
        for card in (_card(), _card(editors=["u1"]), _card(viewers=["u1"])):
            self.assertFalse(can_edit(viewer, card))

    def test_editor_allow_list_scenario(self) -> None:
        card = _card(viewers=[], editors=["u7"])
        u7 = _user("u7", role="editor")
        u8 = _user("u8", role="editor")
        self.assertTrue(can_view(u8, card))
        self.assertFalse(can_edit(u8, card))
        self.assertTrue(can_edit(u7, card))

    def test_admin_edits_restricted_card(self) -> None:
        self.assertTrue(can_edit(_user("a1", role="admin"), _card(editors=["u7"])))

    def test_pending_editor_cannot_edit(self) -> None:
        self.assertFalse(can_edit(_user(status="pending"), _card()))

    def test_none_allow_lists_mean_unrestricted(self) -> None:
        card = SimpleNamespace(allowed_viewer_ids=None, allowed_editor_ids=None)
        self.assertTrue(can_view(_user(role="viewer"), card))
        self.assertTrue(can_edit(_user(role="editor"), card))


class TestDeletePermissions(unittest.TestCase):
    """Delete rights: editors need their permission flag; admin bypasses."""

    def test_editor_without_card_permission(self) -> None:
        editor = _user(can_delete_cards=False)
        self.assertTrue(can_edit(editor, _card()))
        self.assertFalse(can_delete_card(editor, _card()))

    def test_editor_card_delete_requires_edit_right(self) -> None:
        self.assertFalse(can_delete_card(_user("u8"), _card(editors=["u7"])))
        self.assertTrue(can_delete_card(_user("u7"), _card(editors=["u7"])))

    def test_admin_ignores_flags(self) -> None:
        admin = _user("a1", role="admin", can_delete_cards=False, can_delete_columns=False)
        self.assertTrue(can_delete_card(admin, _card(editors=["u7"])))
        self.assertTrue(can_delete_column(admin))

    def test_column_delete(self) -> None:
        self.assertTrue(can_delete_column(_user()))
        self.assertFalse(can_delete_column(_user(can_delete_columns=False)))
        self.assertFalse(can_delete_column(_user(role="viewer")))


class TestHelpers(unittest.TestCase):
    def test_is_admin_requires_approval(self) -> None:
        self.assertTrue(is_admin(_user(role="admin")))
        self.assertFalse(is_admin(_user(role="admin", status="pending")))

    def test_can_edit_board(self) -> None:
        self.assertTrue(can_edit_board(_user(role="editor")))
        self.assertFalse(can_edit_board(_user(role="viewer")))

    def test_visible_cards_filters(self) -> None:
        open_card = _card()
        hidden = _card(viewers=["someone-else"])
        self.assertEqual(visible_cards(_user("u1"), [open_card, hidden]), [open_card])


if __name__ == "__main__":
    unittest.main()
