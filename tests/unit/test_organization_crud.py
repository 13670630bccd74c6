import pytest

from protocol_service.db import models, schemas
from protocol_service.db.errors import BadRequest, NotFound, ValidationError
from protocol_service.db.repositories import organizations as repo_orgs


def _payload(**overrides):
    data = {
        "name": "Acme",
        "organization_type": "clinic",
        "address": "1 Main St",
        "postal_code": "12345",
        "city": "Springfield",
        "country": "US",
        "parent_id": None,
    }
    data.update(overrides)
    return data


def test_create_assigns_id_and_timestamp(db_session, other_session):
    record = schemas.OrganizationCreate(**_payload())
    created = repo_orgs.create_organization(db_session, record)
    assert created.id == 1
    assert created.version == 1
    assert created.created_or_edited is not None
    assert created.created_or_edited.tzinfo is not None

    fetched = repo_orgs.get_organization(other_session, created.id)
    as_record = schemas.Organization.model_validate(fetched).model_dump(include=set(schemas.OrganizationCreate.model_fields))
    assert as_record == record.model_dump()


def test_create_accepts_mapping(db_session):
    created = repo_orgs.create_organization(db_session, {"name": "Mapped", "organization_type": "lab"})
    assert created.name == "Mapped"
    assert created.city is None


def test_create_missing_required_field(db_session):
    with pytest.raises(ValidationError) as exc:
        repo_orgs.create_organization(db_session, {"name": "NoType"})
    assert exc.value.field == "organization_type"
    assert db_session.query(models.Organization).count() == 0


def test_create_blank_name_rejected(db_session):
    with pytest.raises(ValidationError) as exc:
        repo_orgs.create_organization(db_session, _payload(name="   "))
    assert exc.value.field == "name"
    assert exc.value.entity == "Organization"


def test_list_in_insertion_order(db_session):
    for name in ("Charlie", "Alpha", "Bravo"):
        repo_orgs.create_organization(db_session, _payload(name=name))
    assert [o.name for o in repo_orgs.list_organizations(db_session)] == ["Charlie", "Alpha", "Bravo"]


def test_list_empty(db_session):
    assert repo_orgs.list_organizations(db_session) == []


def test_missing_ids_signal_not_found(db_session):
    with pytest.raises(NotFound) as exc:
        repo_orgs.get_organization(db_session, 42)
    assert exc.value.entity == "Organization"
    assert exc.value.entity_id == 42
    with pytest.raises(NotFound):
        repo_orgs.update_organization(db_session, 42, _payload(id=42, version=1))
    with pytest.raises(NotFound):
        repo_orgs.delete_organization(db_session, 42)
    assert repo_orgs.organization_exists(db_session, 42) is False


def test_update_is_full_replace_and_restamps(db_session, other_session):
    created = repo_orgs.create_organization(db_session, _payload())
    org_id = created.id
    stamped = created.created_or_edited

    repo_orgs.update_organization(
        db_session,
        org_id,
        {"id": org_id, "version": 1, "name": "Acme Health", "organization_type": "hospital"},
    )

    fetched = repo_orgs.get_organization(other_session, org_id)
    assert fetched.name == "Acme Health"
    assert fetched.organization_type == "hospital"
    # Fields omitted from the record are cleared, not merged
    assert fetched.city is None
    assert fetched.address is None
    assert fetched.version == 2
    assert fetched.created_or_edited >= stamped


def test_update_id_mismatch_is_bad_request(db_session):
    created = repo_orgs.create_organization(db_session, _payload())
    with pytest.raises(BadRequest) as exc:
        repo_orgs.update_organization(db_session, created.id, _payload(id=created.id + 1, version=1))
    assert exc.value.record_id == created.id + 1


def test_update_validates_required_fields(db_session):
    created = repo_orgs.create_organization(db_session, _payload())
    with pytest.raises(ValidationError):
        repo_orgs.update_organization(db_session, created.id, _payload(id=created.id, version=1, name=""))


def test_delete_then_get_not_found(db_session):
    created = repo_orgs.create_organization(db_session, _payload())
    org_id = created.id
    repo_orgs.delete_organization(db_session, org_id)
    assert repo_orgs.organization_exists(db_session, org_id) is False
    with pytest.raises(NotFound):
        repo_orgs.get_organization(db_session, org_id)


def test_ids_are_not_reused_in_sequence(db_session):
    first = repo_orgs.create_organization(db_session, _payload(name="One")).id
    second = repo_orgs.create_organization(db_session, _payload(name="Two")).id
    assert second > first
