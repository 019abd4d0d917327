from inventory_pro.models.activity import Activity
from inventory_pro.models.item import Item
from inventory_pro.models.tenant import Tenant
from inventory_pro.models.user import User
from inventory_pro.services.credential_service import authenticate
from inventory_pro.services.seed import DEMO_ITEMS, DEMO_PASSWORD, seed_demo


def test_seed_demo_is_idempotent(db_session):
    seed_demo(db_session)
    seed_demo(db_session)

    assert db_session.query(Tenant).count() == 1
    assert db_session.query(User).count() == 2
    assert db_session.query(Item).count() == len(DEMO_ITEMS)
    created = db_session.query(Activity).filter(Activity.type == "created").all()
    assert len(created) == len(DEMO_ITEMS)
    assert {a.user_name for a in created} == {"Demo Administrator"}


def test_seeded_member_can_log_in(db_session):
    seed_demo(db_session)
    user = authenticate(db_session, "user@inventorypro.com", DEMO_PASSWORD)
    assert user.role == "member"
