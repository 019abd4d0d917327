import pytest

from inventory_pro.core.errors import DuplicateRecord, NotFound
from inventory_pro.models.activity import Activity
from inventory_pro.models.item import Item
from inventory_pro.repositories.activity_repository import ActivityRepository
from inventory_pro.repositories.item_repository import ItemRepository
from inventory_pro.services import ledger_service


@pytest.fixture()
def two_tenants(make_context):
    return make_context(), make_context(company_name="Beta", email="admin@beta.com")


def test_find_only_returns_rows_of_the_given_tenant(db_session, two_tenants):
    a, b = two_tenants
    ledger_service.create_item(db_session, a, "Widget", "A-1", 1)
    ledger_service.create_item(db_session, b, "Gadget", "B-1", 2)

    repo = ItemRepository(db_session)
    assert [item.barcode for item in repo.find(a.tenant_id)] == ["A-1"]
    assert [item.barcode for item in repo.find(b.tenant_id)] == ["B-1"]
    assert repo.find(a.tenant_id, barcode="B-1") == []


def test_foreign_and_missing_rows_are_both_not_found(db_session, two_tenants):
    a, b = two_tenants
    item = ledger_service.create_item(db_session, a, "Widget", "A-1", 1)
    repo = ItemRepository(db_session)

    for tenant_id, item_id in ((b.tenant_id, item.id), (a.tenant_id, 99999)):
        with pytest.raises(NotFound) as exc_info:
            repo.get(tenant_id, item_id)
        assert exc_info.value.message == "Item not found"
        with pytest.raises(NotFound):
            repo.update(tenant_id, item_id, {"quantity": 50})
        with pytest.raises(NotFound):
            repo.delete(tenant_id, item_id)

    db_session.expire_all()
    assert db_session.get(Item, item.id).quantity == 1


def test_tenant_id_is_mandatory(db_session, two_tenants):
    repo = ItemRepository(db_session)
    with pytest.raises(ValueError):
        repo.find(None)
    with pytest.raises(ValueError):
        repo.insert(None, Item(name="x", barcode="x", quantity=0))


def test_insert_refuses_entity_of_another_tenant(db_session, two_tenants):
    a, b = two_tenants
    with pytest.raises(ValueError):
        ItemRepository(db_session).insert(a.tenant_id, Item(name="x", barcode="x", quantity=0, tenant_id=b.tenant_id))


def test_barcode_and_tenant_are_immutable(db_session, two_tenants):
    a, b = two_tenants
    item = ledger_service.create_item(db_session, a, "Widget", "A-1", 1)
    repo = ItemRepository(db_session)
    with pytest.raises(ValueError):
        repo.update(a.tenant_id, item.id, {"barcode": "A-2"})
    with pytest.raises(ValueError):
        repo.update(a.tenant_id, item.id, {"tenant_id": b.tenant_id})


def test_activity_entries_are_append_only(db_session, two_tenants):
    a, _ = two_tenants
    ledger_service.create_item(db_session, a, "Widget", "A-1", 1)
    entry = db_session.query(Activity).one()
    repo = ActivityRepository(db_session)
    with pytest.raises(TypeError):
        repo.update(a.tenant_id, entry.id, {"quantity_delta": 100})
    with pytest.raises(TypeError):
        repo.delete(a.tenant_id, entry.id)


def test_exists_anywhere_spans_tenants(db_session, two_tenants):
    a, b = two_tenants
    ledger_service.create_item(db_session, a, "Widget", "A-1", 1)
    repo = ItemRepository(db_session)
    assert repo.barcode_taken(b.tenant_id, "A-1", scope="global")
    assert not repo.barcode_taken(b.tenant_id, "A-1", scope="tenant")
    assert repo.barcode_taken(a.tenant_id, "A-1", scope="tenant")


def test_global_barcode_is_unique_in_the_store(db_session, two_tenants):
    a, b = two_tenants
    repo = ItemRepository(db_session)
    repo.insert(a.tenant_id, Item(name="Widget", barcode="A-1", quantity=1))
    db_session.commit()

    with pytest.raises(DuplicateRecord):
        repo.insert(b.tenant_id, Item(name="Copy", barcode="A-1", quantity=1))
    db_session.rollback()
    assert db_session.query(Item).filter_by(barcode="A-1").count() == 1
