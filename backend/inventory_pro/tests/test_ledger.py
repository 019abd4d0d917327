import random

import pytest
from sqlalchemy.exc import OperationalError

from inventory_pro.core.config import settings
from inventory_pro.core.database import engine
from inventory_pro.core.errors import DuplicateBarcode, NotFound, StorageError, ValidationError
from inventory_pro.models.activity import Activity
from inventory_pro.models.item import BARCODE_INDEX_NAME, MAX_QUANTITY, Item
from inventory_pro.repositories.activity_repository import ActivityRepository
from inventory_pro.repositories.item_repository import ItemRepository
from inventory_pro.services import ledger_service


@pytest.fixture()
def ctx(make_context):
    return make_context()


def entries(db, item_name=None):
    db.expire_all()
    query = db.query(Activity).order_by(Activity.id)
    if item_name:
        query = query.filter(Activity.item_name == item_name)
    return query.all()


def test_create_item_writes_created_entry(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, " Widget ", " A-1 ", 10)
    assert (item.name, item.barcode, item.quantity) == ("Widget", "A-1", 10)

    [entry] = entries(db_session)
    assert entry.type == "created"
    assert entry.quantity_delta == 10
    assert entry.prior_quantity == 0
    assert entry.item_id == item.id
    assert entry.item_name == "Widget"
    assert entry.user_name == ctx.user_name
    assert entry.tenant_id == ctx.tenant_id


@pytest.mark.parametrize("name,barcode,quantity", [("", "A-1", 1), ("Widget", "  ", 1), ("Widget", "A-1", -1)])
def test_create_item_validates_input(db_session, ctx, name, barcode, quantity):
    with pytest.raises(ValidationError):
        ledger_service.create_item(db_session, ctx, name, barcode, quantity)
    assert db_session.query(Item).count() == 0


def test_removal_past_stock_clamps_to_zero(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    item = ledger_service.adjust_quantity(db_session, ctx, item.id, -15)
    assert item.quantity == 0

    last = entries(db_session)[-1]
    assert last.type == "removed"
    assert last.quantity_delta == 10
    assert last.prior_quantity == 10


def test_addition_is_recorded_as_added(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 2)
    item = ledger_service.adjust_quantity(db_session, ctx, item.id, 5)
    assert item.quantity == 7
    last = entries(db_session)[-1]
    assert (last.type, last.quantity_delta, last.prior_quantity) == ("added", 5, 2)


def test_set_quantity_uses_absolute_target(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 8)
    item = ledger_service.set_quantity(db_session, ctx, item.id, 3)
    assert item.quantity == 3
    item = ledger_service.set_quantity(db_session, ctx, item.id, -4)
    assert item.quantity == 0
    types = [(e.type, e.quantity_delta, e.prior_quantity) for e in entries(db_session)]
    assert types == [("created", 8, 0), ("removed", 5, 8), ("removed", 3, 3)]


def test_zero_delta_adjustment_is_suppressed_by_default(db_session, ctx, monkeypatch):
    monkeypatch.setattr(settings, "record_zero_delta_adjustments", False)
    item = ledger_service.create_item(db_session, ctx, "Empty", "E-1", 0)
    item = ledger_service.adjust_quantity(db_session, ctx, item.id, -3)
    assert item.quantity == 0
    assert [e.type for e in entries(db_session)] == ["created"]


def test_zero_delta_adjustment_can_be_recorded(db_session, ctx, monkeypatch):
    monkeypatch.setattr(settings, "record_zero_delta_adjustments", True)
    item = ledger_service.create_item(db_session, ctx, "Empty", "E-1", 0)
    item = ledger_service.adjust_quantity(db_session, ctx, item.id, -3)
    assert item.quantity == 0
    last = entries(db_session)[-1]
    assert (last.type, last.quantity_delta, last.prior_quantity) == ("removed", 0, 0)


def test_audit_trail_reconstructs_final_quantity(db_session, ctx):
    rng = random.Random(1234)
    initial = 20
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", initial)
    expected = initial
    for _ in range(60):
        delta = rng.randint(-12, 12)
        expected = max(0, expected + delta)
        item = ledger_service.adjust_quantity(db_session, ctx, item.id, delta)
        assert item.quantity == expected

    replayed = initial
    for entry in entries(db_session):
        if entry.type == "added":
            replayed += entry.quantity_delta
        elif entry.type == "removed":
            replayed -= entry.quantity_delta
    assert replayed == expected == item.quantity


def test_duplicate_barcode_in_any_tenant_fails_and_writes_nothing(db_session, ctx, make_context, monkeypatch):
    monkeypatch.setattr(settings, "barcode_scope", "global")
    other = make_context(company_name="Beta", email="admin@beta.com")
    ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)

    for acting in (ctx, other):
        with pytest.raises(DuplicateBarcode):
            ledger_service.create_item(db_session, acting, "Copy", "A-1", 3)

    db_session.expire_all()
    assert db_session.query(Item).count() == 1
    assert len(entries(db_session)) == 1


def test_per_tenant_barcode_scope(db_session, ctx, make_context, monkeypatch):
    monkeypatch.setattr(settings, "barcode_scope", "tenant")
    # Tables are built with the global unique index; drop it for this test
    barcode_index = next(ix for ix in Item.__table__.indexes if ix.name == BARCODE_INDEX_NAME)
    barcode_index.drop(bind=engine)
    other = make_context(company_name="Beta", email="admin@beta.com")
    ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    ledger_service.create_item(db_session, other, "Widget", "A-1", 4)
    with pytest.raises(DuplicateBarcode):
        ledger_service.create_item(db_session, ctx, "Copy", "A-1", 1)
    assert db_session.query(Item).count() == 2


def test_lost_barcode_race_is_reported_as_duplicate(db_session, ctx, make_context, monkeypatch):
    other = make_context(company_name="Beta", email="admin@beta.com")
    ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    # Another transaction inserted the barcode after this one checked for it
    monkeypatch.setattr(ItemRepository, "barcode_taken", lambda self, tenant_id, barcode, scope: False)

    with pytest.raises(DuplicateBarcode):
        ledger_service.create_item(db_session, other, "Copy", "A-1", 3)

    db_session.expire_all()
    assert db_session.query(Item).count() == 1
    assert len(entries(db_session)) == 1


def test_delete_item_records_prior_quantity(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    item_id = item.id
    ledger_service.adjust_quantity(db_session, ctx, item_id, -4)
    ledger_service.delete_item(db_session, ctx, item_id)

    db_session.expire_all()
    assert db_session.get(Item, item_id) is None
    history = entries(db_session)
    deleted = [e for e in history if e.type == "deleted"]
    assert len(deleted) == 1
    assert deleted[0].quantity_delta is None
    assert deleted[0].prior_quantity == 6
    assert deleted[0].item_name == "Widget"
    # History survives the item; references to it are cleared
    assert [e.type for e in history] == ["created", "removed", "deleted"]
    assert all(e.item_id is None for e in history)


def test_missing_item_operations_are_not_found(db_session, ctx):
    with pytest.raises(NotFound):
        ledger_service.adjust_quantity(db_session, ctx, 404, 1)
    with pytest.raises(NotFound):
        ledger_service.delete_item(db_session, ctx, 404)
    with pytest.raises(NotFound):
        ledger_service.find_by_barcode(db_session, ctx, "nope")
    assert entries(db_session) == []


def test_find_by_barcode_is_tenant_scoped(db_session, ctx, make_context):
    other = make_context(company_name="Beta", email="admin@beta.com")
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    assert ledger_service.find_by_barcode(db_session, ctx, " A-1 ").id == item.id
    with pytest.raises(NotFound):
        ledger_service.find_by_barcode(db_session, other, "A-1")


def test_failed_audit_write_rolls_back_quantity_change(db_session, ctx, monkeypatch):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    item_id = item.id

    def failing_append(self, tenant_id, entry):
        raise OperationalError("INSERT INTO activities", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ActivityRepository, "append", failing_append)
    with pytest.raises(StorageError):
        ledger_service.adjust_quantity(db_session, ctx, item_id, 5)
    with pytest.raises(StorageError):
        ledger_service.delete_item(db_session, ctx, item_id)

    db_session.expire_all()
    assert db_session.get(Item, item_id).quantity == 10
    assert len(entries(db_session)) == 1


def test_failed_create_leaves_no_item(db_session, ctx, monkeypatch):
    def failing_append(self, tenant_id, entry):
        raise OperationalError("INSERT INTO activities", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ActivityRepository, "append", failing_append)
    with pytest.raises(StorageError):
        ledger_service.create_item(db_session, ctx, "Widget", "A-1", 10)
    assert db_session.query(Item).count() == 0


def test_activity_feed_is_newest_first_and_limited(db_session, ctx, monkeypatch):
    monkeypatch.setattr(settings, "activity_feed_limit", 3)
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", 1)
    for _ in range(4):
        ledger_service.adjust_quantity(db_session, ctx, item.id, 1)
    feed = ledger_service.list_activities(db_session, ctx)
    assert len(feed) == 3
    assert [e.prior_quantity for e in feed] == [4, 3, 2]


def test_adjustment_past_the_column_limit_is_rejected(db_session, ctx):
    item = ledger_service.create_item(db_session, ctx, "Widget", "A-1", MAX_QUANTITY - 1)
    item_id = item.id

    with pytest.raises(ValidationError):
        ledger_service.adjust_quantity(db_session, ctx, item_id, 5)
    with pytest.raises(ValidationError):
        ledger_service.create_item(db_session, ctx, "Huge", "A-2", MAX_QUANTITY + 1)

    db_session.expire_all()
    assert db_session.get(Item, item_id).quantity == MAX_QUANTITY - 1
    assert len(entries(db_session)) == 1
