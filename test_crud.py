"""
Functional tests for the UmutiSafe CRUD layer.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from umutisafe.core.exceptions import BadRequestException
from umutisafe.core.security import verify_password
from umutisafe.crud import crud_education_tip, crud_user
from umutisafe.crud.user import check_email_domain, is_gov_email
from umutisafe.models import Disposal, EducationTip, PickupRequest, User
from umutisafe.schemas.user import UserCreate


def test_create_user_hashes_and_normalizes(db):
    user = crud_user.create_user(
        db,
        user_in=UserCreate(name="Marie Claire", email="Marie@Gmail.com", password="secret123"),
    )

    assert user.email == "marie@gmail.com"
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert user.avatar == "MC"
    assert user.is_approved is False
    assert crud_user.get_by_email(db, " MARIE@gmail.com ").id == user.id


def test_admin_is_approved_on_creation(db):
    admin = crud_user.create_user(
        db,
        user_in=UserCreate(name="Root Admin", email="root@umutisafe.gov.rw", password="secret123", role="admin"),
    )

    assert admin.is_approved is True
    assert admin.approved_at is not None


def test_authenticate(db, citizen):
    assert crud_user.authenticate(db, email="jean@gmail.com", password="password123").id == citizen.id
    assert crud_user.authenticate(db, email="jean@gmail.com", password="wrong") is None
    assert crud_user.authenticate(db, email="nobody@gmail.com", password="password123") is None


def test_record_login_returns_previous_value(db, citizen):
    assert crud_user.record_login(db, user=citizen) is None
    first = citizen.last_login

    assert crud_user.record_login(db, user=citizen) == first
    assert citizen.last_login >= first


@pytest.mark.parametrize(
    "email, role, ok",
    [
        ("boss@umutisafe.gov.rw", "admin", True),
        ("boss@gmail.com", "admin", False),
        ("someone@UMUTISAFE.GOV.RW", "user", False),
        ("someone@gmail.com", "chw", True),
    ],
)
def test_check_email_domain(email, role, ok):
    if ok:
        check_email_domain(email, role)
    else:
        with pytest.raises(BadRequestException):
            check_email_domain(email, role)


def test_is_gov_email_requires_exact_domain():
    assert is_gov_email("a@umutisafe.gov.rw")
    assert not is_gov_email("a@notumutisafe.gov.rw.example.com")


def test_list_pending_oldest_first(db, make_user):
    older = make_user("older@gmail.com", approved=False)
    newer = make_user("newer@gmail.com", approved=False)
    make_user("inactive@gmail.com", approved=False, active=False)
    crud_user.update(db, db_obj=older, obj_in={"created_at": datetime.utcnow() - timedelta(days=2)})

    assert [u.id for u in crud_user.list_pending(db)] == [older.id, newer.id]


def test_list_users_filters_and_paginates(db, citizen, chw, admin):
    users, total = crud_user.list_users(db, role="chw", search=None, page=1, limit=10)
    assert total == 1
    assert users[0].id == chw.id

    users, total = crud_user.list_users(db, role=None, search="jean", page=1, limit=10)
    assert [u.id for u in users] == [citizen.id]

    users, total = crud_user.list_users(db, role=None, search=None, page=2, limit=2)
    assert total == 3
    assert len(users) == 1


def test_get_active_chw(db, chw, citizen, make_user):
    retired = make_user("retired.chw@gmail.com", role="chw", active=False)

    assert crud_user.get_active_chw(db, chw.id).id == chw.id
    assert crud_user.get_active_chw(db, citizen.id) is None
    assert crud_user.get_active_chw(db, retired.id) is None


def test_hard_delete_removes_owned_rows(db, citizen, chw):
    pickup = PickupRequest(
        user_id=citizen.id,
        chw_id=chw.id,
        medicine_name="Amoxicillin",
        reason="expired",
        pickup_location="Remera",
        preferred_time=datetime.utcnow(),
        consent_given=True,
    )
    db.add(pickup)
    db.add(Disposal(user_id=citizen.id, generic_name="Amoxicillin"))
    db.commit()

    crud_user.hard_delete(db, user=citizen)

    assert db.get(User, citizen.id) is None
    assert db.scalars(select(Disposal)).all() == []
    assert db.scalars(select(PickupRequest)).all() == []


def test_base_delete_is_soft_when_model_has_is_active(db):
    tip = crud_education_tip.create(
        db, obj_in={"title": "Keep labels", "summary": "Labels help.", "content": "Do not remove them."}
    )

    deleted = crud_education_tip.delete(db, id=tip.id)

    assert deleted.is_active is False
    assert db.get(EducationTip, tip.id) is not None
    assert crud_education_tip.get_active(db, tip.id) is None


def test_get_by_field_rejects_unknown_column(db):
    with pytest.raises(AttributeError):
        crud_user.get_by_field(db, "shoe_size", 42)
