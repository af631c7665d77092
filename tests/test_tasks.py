"""Tests for scheduled expiry tasks."""

import json
from contextlib import contextmanager
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from src.exceptions import StoreUnavailable
from src.models.inventory import InventoryItem
from src.models.user import User
from src.tasks.expiry import check_expiring_items, decay_all_inventories, refresh_owner_inventory


@pytest.fixture
def task_session(db):
    """Run task bodies against the test session."""

    @contextmanager
    def _scope():
        yield db

    with patch("src.tasks.expiry.session_scope", _scope):
        yield db


@pytest.fixture
def second_owner(db):
    user = User(email="second@example.com", password_hash="fake")
    db.add(user)
    db.commit()
    return user


def test_refresh_owner_inventory(task_session, owner, add_item, fake_redis):
    """Test decaying one owner's items from a task."""
    add_item(owner.id, "Milk", 7, datetime.now(UTC), days_ago=3)

    result = refresh_owner_inventory(owner.id)

    assert result == {"owner_id": owner.id, "mutated": 1, "failed_ids": []}
    channel, payload = fake_redis.publish.call_args[0]
    assert channel == f"inventory:{owner.id}"
    assert json.loads(payload)["type"] == "items_decayed"


def test_refresh_owner_inventory_store_down(task_session, owner):
    """Test that an unreachable store is reported, not raised."""
    with patch(
        "src.tasks.expiry.ExpiryDecayEngine.apply_decay",
        side_effect=StoreUnavailable("Item store unavailable: could not list items"),
    ):
        result = refresh_owner_inventory(owner.id)

    assert "error" in result


def test_decay_all_inventories(task_session, owner, second_owner, add_item, fake_redis):
    """Test the nightly pass over every owner with expiring items."""
    now = datetime.now(UTC)
    add_item(owner.id, "Milk", 7, now, days_ago=3)
    add_item(owner.id, "Fish", 1, now, days_ago=5)
    add_item(second_owner.id, "Bread", 4, now, days_ago=1)
    add_item(second_owner.id, "Salt", None, now, days_ago=10)

    stats = decay_all_inventories()

    assert stats == {"owners": 2, "mutated": 3, "failed": 0, "owners_skipped": 0}
    assert fake_redis.publish.call_count == 2

    task_session.expire_all()
    days = {item.name: item.expiry_days for item in task_session.query(InventoryItem).all()}
    assert days == {"Milk": 4, "Fish": 0, "Bread": 3, "Salt": None}


def test_decay_all_inventories_is_idempotent(task_session, owner, add_item):
    """Test that running the nightly pass twice in a day decays once."""
    add_item(owner.id, "Milk", 7, datetime.now(UTC), days_ago=3)

    assert decay_all_inventories()["mutated"] == 1
    assert decay_all_inventories()["mutated"] == 0


def test_decay_all_inventories_skips_unavailable_owner(task_session, owner, second_owner, add_item):
    """Test that one failing owner does not stop the others."""
    now = datetime.now(UTC)
    add_item(owner.id, "Milk", 7, now, days_ago=3)
    add_item(second_owner.id, "Bread", 4, now, days_ago=1)

    from src.services.expiry import ExpiryDecayEngine

    real_apply_decay = ExpiryDecayEngine.apply_decay

    def flaky_apply_decay(self, owner_id, now=None):
        if owner_id == owner.id:
            raise StoreUnavailable("Item store unavailable: could not list items")
        return real_apply_decay(self, owner_id, now)

    with patch.object(ExpiryDecayEngine, "apply_decay", flaky_apply_decay):
        stats = decay_all_inventories()

    assert stats["owners"] == 1
    assert stats["owners_skipped"] == 1
    assert stats["mutated"] == 1


def test_check_expiring_items(task_session, owner, add_item):
    """Test the alert list after decay, using the alert threshold."""
    now = datetime.now(UTC)
    add_item(owner.id, "Milk", 7, now, days_ago=3)
    add_item(owner.id, "Fish", 1, now, days_ago=5)
    add_item(owner.id, "Yogurt", 3, now)
    add_item(owner.id, "Rice", None, now)

    result = check_expiring_items(owner.id)

    assert result["threshold"] == 3
    assert [(item["name"], item["expiry_days"]) for item in result["items"]] == [
        ("Fish", 0),
        ("Yogurt", 3),
    ]

    result = check_expiring_items(owner.id, threshold=5)
    assert [item["name"] for item in result["items"]] == ["Fish", "Yogurt", "Milk"]
