from datetime import datetime, timezone

import pytest

from protocol_service.db import models, schemas
from protocol_service.db.errors import ForeignKeyViolation, NotFound
from protocol_service.db.repositories import protocols as repo_protocols


def test_create_defaults(db_session, organization_factory, user_factory):
    user = user_factory(organization_factory())
    created = repo_protocols.create_protocol(db_session, {"user_id": user.id})
    assert created.id == 1
    assert created.is_draft is True
    assert created.is_reviewed is False
    assert created.is_closed is False
    assert created.closed_at is None
    assert created.review_comment is None


def test_create_and_get_round_trip(db_session, other_session, organization_factory, user_factory):
    user = user_factory(organization_factory())
    record = schemas.ProtocolCreate(
        user_id=user.id,
        is_draft=False,
        is_reviewed=True,
        review_comment="looks good",
        is_closed=True,
        closed_at=datetime(2024, 4, 2, 8, 0, tzinfo=timezone.utc),
    )
    created = repo_protocols.create_protocol(db_session, record)
    fetched = repo_protocols.get_protocol(other_session, created.id)
    as_record = schemas.Protocol.model_validate(fetched).model_dump(include=set(schemas.ProtocolCreate.model_fields))
    assert as_record == record.model_dump()


def test_create_with_missing_owner(db_session):
    with pytest.raises(ForeignKeyViolation) as exc:
        repo_protocols.create_protocol(db_session, {"user_id": 7, "is_draft": True})
    assert exc.value.field == "user_id"
    assert db_session.query(models.Protocol).count() == 0


def test_update_and_delete(db_session, other_session, organization_factory, user_factory, protocol_factory):
    user = user_factory(organization_factory())
    protocol_id = protocol_factory(user).id

    repo_protocols.update_protocol(
        db_session,
        protocol_id,
        {"id": protocol_id, "version": 1, "user_id": user.id, "is_draft": False, "review_comment": "ready"},
    )
    fetched = repo_protocols.get_protocol(other_session, protocol_id)
    assert fetched.is_draft is False
    assert fetched.review_comment == "ready"

    repo_protocols.delete_protocol(db_session, protocol_id)
    assert repo_protocols.protocol_exists(db_session, protocol_id) is False
    with pytest.raises(NotFound):
        repo_protocols.get_protocol(db_session, protocol_id)


def test_list_protocols_for_user(db_session, organization_factory, user_factory, protocol_factory):
    org = organization_factory()
    owner = user_factory(org, username="owner")
    other = user_factory(org, username="other")
    p1 = protocol_factory(owner)
    protocol_factory(other)
    p3 = protocol_factory(owner)
    assert [p.id for p in repo_protocols.list_protocols_for_user(db_session, owner.id)] == [p1.id, p3.id]
    assert len(repo_protocols.list_protocols(db_session)) == 3


def test_additional_users_membership(db_session, organization_factory, user_factory, protocol_factory):
    org = organization_factory()
    owner = user_factory(org, username="owner")
    helper = user_factory(org, username="helper")
    reviewer = user_factory(org, username="reviewer")
    protocol = protocol_factory(owner)

    repo_protocols.add_additional_user(db_session, protocol.id, helper.id)
    repo_protocols.add_additional_user(db_session, protocol.id, reviewer.id)
    # Granting twice keeps a single row
    repo_protocols.add_additional_user(db_session, protocol.id, helper.id)

    assert db_session.query(models.AdditionalUser).count() == 2
    participants = repo_protocols.list_additional_users(db_session, protocol.id)
    assert [u.username for u in participants] == ["helper", "reviewer"]
    assert [p.id for p in repo_protocols.list_participating_protocols(db_session, helper.id)] == [protocol.id]

    repo_protocols.remove_additional_user(db_session, protocol.id, helper.id)
    assert [u.username for u in repo_protocols.list_additional_users(db_session, protocol.id)] == ["reviewer"]
    with pytest.raises(NotFound):
        repo_protocols.remove_additional_user(db_session, protocol.id, helper.id)


def test_additional_user_requires_both_parents(db_session, organization_factory, user_factory, protocol_factory):
    user = user_factory(organization_factory())
    protocol = protocol_factory(user)
    with pytest.raises(NotFound):
        repo_protocols.add_additional_user(db_session, 999, user.id)
    with pytest.raises(ForeignKeyViolation):
        repo_protocols.add_additional_user(db_session, protocol.id, 999)
    assert db_session.query(models.AdditionalUser).count() == 0


def test_additional_user_rows_follow_either_parent(db_session, organization_factory, user_factory, protocol_factory):
    org = organization_factory()
    owner = user_factory(org, username="owner")
    helper = user_factory(org, username="helper")
    first = protocol_factory(owner)
    second = protocol_factory(owner)
    first_id, second_id, helper_id = first.id, second.id, helper.id
    repo_protocols.add_additional_user(db_session, first_id, helper_id)
    repo_protocols.add_additional_user(db_session, second_id, helper_id)

    repo_protocols.delete_protocol(db_session, first_id)
    assert db_session.query(models.AdditionalUser).count() == 1

    from protocol_service.db.repositories import users as repo_users
    repo_users.delete_user(db_session, helper_id)
    assert db_session.query(models.AdditionalUser).count() == 0
    assert repo_protocols.protocol_exists(db_session, second_id) is True


def test_update_missing_protocol_is_not_found(db_session, organization_factory, user_factory):
    user = user_factory(organization_factory())
    with pytest.raises(NotFound) as exc:
        repo_protocols.update_protocol(db_session, 55, {"id": 55, "version": 1, "user_id": user.id})
    assert exc.value.entity == "Protocol"


def test_concurrent_grant_of_same_pair_returns_existing_row(
    db_session, other_session, organization_factory, user_factory, protocol_factory, monkeypatch
):
    org = organization_factory()
    owner = user_factory(org, username="owner")
    helper = user_factory(org, username="helper")
    protocol_id = protocol_factory(owner).id
    helper_id = helper.id

    original_find = repo_protocols._find_additional_user
    calls = []

    def find_then_race(db, pid, uid):
        calls.append(pid)
        if len(calls) == 1:
            # Another caller grants the same pair after our existence check
            other_session.add(models.AdditionalUser(user_id=uid, protocol_id=pid))
            other_session.commit()
            return None
        return original_find(db, pid, uid)

    monkeypatch.setattr(repo_protocols, "_find_additional_user", find_then_race)

    granted = repo_protocols.add_additional_user(db_session, protocol_id, helper_id)
    assert (granted.protocol_id, granted.user_id) == (protocol_id, helper_id)
    assert len(calls) == 2
    assert db_session.query(models.AdditionalUser).count() == 1
