import pytest
from app.exceptions import ActionNotAllowedError
from app.schemas.property import PropertyStatus
from app.services.moderation import (
    QuickActionsPanel,
    allowed_targets,
    badge_for,
    ensure_transition,
    visible_actions,
)

EXPECTED_ACTIONS = {
    "pending": ["approve", "reject"],
    "approved": ["reject", "publish"],
    "published": ["unpublish"],
    "unpublished": ["publish"],
    "rejected": [],
}

@pytest.mark.parametrize("status,keys", EXPECTED_ACTIONS.items())
def test_visible_actions_match_table(status, keys):
    assert [a.key for a in visible_actions(status)] == keys

def test_published_only_offers_unpublish():
    labels = [a.label for a in visible_actions(PropertyStatus.PUBLISHED)]
    assert labels == ["Batalkan Publikasi"]

def test_approved_offers_reject_and_publish():
    labels = [a.label for a in visible_actions("approved")]
    assert labels == ["Tolak", "Publikasikan"]

def test_allowed_targets_for_pending():
    assert allowed_targets("pending") == {PropertyStatus.APPROVED, PropertyStatus.REJECTED}

def test_ensure_transition_rejects_terminal_state():
    with pytest.raises(ActionNotAllowedError) as exc:
        ensure_transition("rejected", "published")
    assert exc.value.current_status == "rejected"
    assert exc.value.target == "published"

def test_ensure_transition_accepts_legal_move():
    ensure_transition("unpublished", "published")

def test_unknown_status_is_a_value_error():
    with pytest.raises(ValueError):
        visible_actions("archived")

def test_badge_for_each_status():
    assert badge_for("pending") == {"label": "Menunggu Review", "color": "yellow", "icon": "clock", "icon_size": 12}
    assert badge_for("rejected", "sm")["icon_size"] == 10
    assert badge_for("published", "lg")["label"] == "Dipublikasi"
    assert badge_for("unpublished")["color"] == "gray"

def test_badge_rejects_unknown_size():
    with pytest.raises(ValueError):
        badge_for("pending", "xl")

def test_panel_trigger_calls_status_change():
    calls = []
    panel = QuickActionsPanel("prop-1", "approved", on_status_change=lambda pid, s: calls.append((pid, s)))
    panel.trigger("publish")
    assert calls == [("prop-1", PropertyStatus.PUBLISHED)]

def test_panel_trigger_refuses_hidden_action():
    calls = []
    panel = QuickActionsPanel("prop-1", "published", on_status_change=lambda pid, s: calls.append(s))
    with pytest.raises(ActionNotAllowedError):
        panel.trigger("approve")
    assert calls == []

def test_panel_compact_keeps_first_two():
    panel = QuickActionsPanel("prop-1", "pending", on_status_change=lambda *a: None, compact=True)
    assert [a.key for a in panel.actions()] == ["approve", "reject"]

def test_panel_edit_and_delete_callbacks():
    edited, deleted = [], []
    panel = QuickActionsPanel(
        "prop-9",
        "rejected",
        on_status_change=lambda *a: None,
        on_edit=edited.append,
        on_delete=deleted.append,
    )
    assert panel.actions() == []
    assert panel.can_edit and panel.can_delete
    panel.edit()
    panel.delete()
    assert edited == ["prop-9"]
    assert deleted == ["prop-9"]

def test_panel_without_optional_callbacks():
    panel = QuickActionsPanel("prop-9", "pending", on_status_change=lambda *a: None)
    assert not panel.can_edit
    assert panel.edit() is None
    assert panel.delete() is None
