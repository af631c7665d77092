"""Tests for the inventory item store."""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.exceptions import ItemNotFound, ItemValidationError, StoreUnavailable
from src.models.inventory import InventoryItem
from src.models.mixins import as_utc
from src.models.user import User
from src.services.inventory_store import InventoryStore, coerce_item_fields

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


class TestCoerceItemFields:
    """Tests for normalizing loosely typed item payloads."""

    def test_numeric_strings_are_parsed(self):
        """Test that quantities and days given as text become numbers."""
        values = coerce_item_fields({"name": "Eggs", "quantity": "12", "expiry_days": "7"})
        assert values["quantity"] == 12.0
        assert values["expiry_days"] == 7

    def test_blanks_become_defaults(self):
        """Test that blank fields mean zero quantity, default unit and no expiry."""
        values = coerce_item_fields(
            {"name": "  Rice ", "quantity": "", "unit": "", "category": " ", "expiry_days": ""}
        )
        assert values == {
            "name": "Rice",
            "quantity": 0.0,
            "unit": "pcs",
            "category": None,
            "expiry_days": None,
        }

    @pytest.mark.parametrize(
        "fields",
        [
            {"name": ""},
            {"name": "   "},
            {"name": "Milk", "quantity": "a lot"},
            {"name": "Milk", "quantity": -1},
            {"name": "Milk", "expiry_days": -3},
            {"name": "Milk", "expiry_days": "soon"},
            {"name": "Milk", "expiry_days": 2.5},
            {"name": "Milk", "colour": "white"},
        ],
    )
    def test_invalid_fields_rejected(self, fields):
        """Test that bad input is rejected rather than coerced to garbage."""
        with pytest.raises(ItemValidationError):
            coerce_item_fields(fields)

    def test_expiry_date_converted_to_days(self):
        """Test that a printed expiry date becomes days from today."""
        values = coerce_item_fields(
            {"name": "Juice", "expiry_date": "29-10-2026"}, today=date(2026, 10, 19)
        )
        assert values["expiry_days"] == 10

    def test_partial_keeps_only_given_fields(self):
        """Test that partial updates leave absent fields untouched."""
        assert coerce_item_fields({"quantity": "3"}, partial=True) == {"quantity": 3.0}

    def test_partial_null_expiry_clears(self):
        """Test that an explicit null expiry makes the item non-expiring."""
        assert coerce_item_fields({"expiry_days": None}, partial=True) == {"expiry_days": None}

    def test_partial_blank_expiry_is_unchanged(self):
        """Test that blank expiry fields on an edit are treated as not given."""
        fields = {"name": "Milk", "expiry_date": "", "expiry_days": "  ", "unit": ""}
        assert coerce_item_fields(fields, partial=True) == {"name": "Milk"}

    def test_partial_null_expiry_date_is_unchanged(self):
        """Test that a null expiry date alone does not clear the expiry."""
        assert coerce_item_fields({"expiry_date": None}, partial=True) == {}


class TestInventoryStore:
    """Tests for store operations against the database."""

    def test_create_derives_status(self, db, owner):
        """Test that new items get a status matching expiry_days."""
        store = InventoryStore(db)

        warning = store.create_item(owner.id, {"name": "Milk", "expiry_days": 4}, now=NOW)
        good = store.create_item(owner.id, {"name": "Rice", "expiry_days": 30}, now=NOW)
        perpetual = store.create_item(owner.id, {"name": "Salt"}, now=NOW)

        assert warning.status == "warning"
        assert good.status == "good"
        assert perpetual.status is None
        assert perpetual.expiry_days is None
        assert len(warning.id) == 32
        assert as_utc(warning.updated_at) == NOW

    def test_create_items_validates_all_before_writing(self, db, owner):
        """Test that one bad row in a batch writes nothing."""
        store = InventoryStore(db)

        with pytest.raises(ItemValidationError):
            store.create_items(owner.id, [{"name": "Apples"}, {"name": "Pears", "quantity": -2}])

        assert db.query(InventoryItem).count() == 0

    def test_get_item_scoped_to_owner(self, db, owner):
        """Test that another owner's item is not found."""
        other = User(email="other@example.com", password_hash="fake")
        db.add(other)
        db.commit()
        store = InventoryStore(db)
        item = store.create_item(other.id, {"name": "Cheese", "expiry_days": 10})

        with pytest.raises(ItemNotFound):
            store.get_item(owner.id, item.id)

    def test_update_folds_in_owed_decay(self, db, owner, add_item):
        """Test that editing quantity also applies decay owed since the last anchor."""
        item = add_item(owner.id, "Milk", 7, NOW, days_ago=3)

        updated = InventoryStore(db).update_item(owner.id, item.id, {"quantity": 2}, now=NOW)

        assert updated.quantity == 2
        assert updated.expiry_days == 4
        assert updated.status == "warning"
        assert as_utc(updated.updated_at) == NOW

    def test_update_can_raise_expiry(self, db, owner, add_item):
        """Test that an explicit edit is the one way days-to-expiry goes up."""
        item = add_item(owner.id, "Bread", 1, NOW, days_ago=2)

        updated = InventoryStore(db).update_item(owner.id, item.id, {"expiry_days": 9}, now=NOW)

        assert updated.expiry_days == 9
        assert updated.status == "good"

    def test_update_to_perpetual_clears_status(self, db, owner, add_item):
        """Test that removing the expiry removes the status."""
        item = add_item(owner.id, "Honey", 3, NOW)

        updated = InventoryStore(db).update_item(owner.id, item.id, {"expiry_days": None}, now=NOW)

        assert updated.expiry_days is None
        assert updated.status is None

    def test_delete_item(self, db, owner, add_item):
        """Test deleting an item, and that deleting twice is not found."""
        item = add_item(owner.id, "Butter", 6, NOW)
        store = InventoryStore(db)

        store.delete_item(owner.id, item.id)

        assert db.query(InventoryItem).count() == 0
        with pytest.raises(ItemNotFound):
            store.delete_item(owner.id, item.id)

    def test_list_items_max_expiry_filter(self, db, owner, add_item):
        """Test that the expiry filter excludes perpetual and distant items."""
        add_item(owner.id, "Fish", 1, NOW)
        add_item(owner.id, "Yogurt", 3, NOW)
        add_item(owner.id, "Rice", None, NOW)
        add_item(owner.id, "Jam", 60, NOW)

        names = {item.name for item in InventoryStore(db).list_items(owner.id, max_expiry_days=3)}

        assert names == {"Fish", "Yogurt"}

    def test_write_decay_is_conditional(self, db, owner, add_item):
        """Test that a write based on a stale read changes nothing."""
        item = add_item(owner.id, "Milk", 7, NOW, days_ago=3)
        store = InventoryStore(db)
        observed = store.get_item(owner.id, item.id).updated_at

        store.update_item(owner.id, item.id, {"quantity": 5}, now=NOW)
        written = store.write_decay(
            item.id,
            expiry_days=0,
            status=None,
            observed_updated_at=observed,
            now=NOW + timedelta(days=1),
        )

        assert written is False
        db.expire_all()
        assert db.query(InventoryItem).one().expiry_days == 4

    def test_owner_ids_with_expiring_items(self, db, owner, add_item):
        """Test that only owners with expiring items are listed."""
        other = User(email="other@example.com", password_hash="fake")
        db.add(other)
        db.commit()
        add_item(owner.id, "Milk", 5, NOW)
        add_item(other.id, "Salt", None, NOW)

        assert InventoryStore(db).owner_ids_with_expiring_items() == [owner.id]

    def test_unreachable_database_is_store_unavailable(self):
        """Test that connection errors surface as StoreUnavailable."""
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailable):
            InventoryStore(session).list_items(1)

        session.rollback.assert_called_once()
