import pytest

from protocol_service.db import models
from protocol_service.db.errors import ConcurrencyConflict, NotFound, ValidationError
from protocol_service.db.repo_utils import commit_versioned
from protocol_service.db.repositories import organizations as repo_orgs
from protocol_service.db.repositories import protocols as repo_protocols


def _org(name, version, org_id):
    return {"id": org_id, "version": version, "name": name, "organization_type": "clinic"}


def test_update_requires_version_token(db_session, organization_factory):
    org_id = organization_factory().id
    with pytest.raises(ValidationError) as exc:
        repo_orgs.update_organization(db_session, org_id, {"id": org_id, "name": "X", "organization_type": "lab"})
    assert exc.value.field == "version"


def test_explicit_stale_version_is_rejected(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    repo_orgs.update_organization(db_session, org_id, _org("First edit", 1, org_id))

    with pytest.raises(ConcurrencyConflict) as exc:
        repo_orgs.update_organization(db_session, org_id, _org("Late edit", 1, org_id))
    assert exc.value.expected_version == 1
    assert repo_orgs.get_organization(other_session, org_id).name == "First edit"


def test_two_writers_same_version_exactly_one_wins(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    # Both callers hold the row they read at version 1
    first_read = repo_orgs.get_organization(db_session, org_id)
    second_read = repo_orgs.get_organization(other_session, org_id)
    assert first_read.version == second_read.version == 1

    repo_orgs.update_organization(db_session, org_id, _org("Winner", 1, org_id))
    with pytest.raises(ConcurrencyConflict):
        repo_orgs.update_organization(other_session, org_id, _org("Loser", 1, org_id))

    stored = repo_orgs.get_organization(other_session, org_id)
    assert stored.name == "Winner"
    assert stored.version == 2


def test_stale_token_rejected_after_read_is_released(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    token = repo_orgs.get_organization(other_session, org_id).version
    # The reader keeps only the token; the session no longer references the row
    other_session.expunge_all()

    repo_orgs.update_organization(db_session, org_id, _org("Fresh", 1, org_id))
    with pytest.raises(ConcurrencyConflict):
        repo_orgs.update_organization(other_session, org_id, _org("Stale", token, org_id))
    assert repo_orgs.get_organization(db_session, org_id).name == "Fresh"


def test_write_after_token_check_is_conditional(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    stale = other_session.get(models.Organization, org_id)
    stale.name = "Stale"

    repo_orgs.update_organization(db_session, org_id, _org("Fresh", 1, org_id))
    with pytest.raises(ConcurrencyConflict):
        commit_versioned(other_session, models.Organization, "Organization", org_id)
    assert repo_orgs.get_organization(other_session, org_id).name == "Fresh"


def test_write_after_token_check_on_deleted_row_is_not_found(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    stale = other_session.get(models.Organization, org_id)
    stale.name = "Stale"

    repo_orgs.delete_organization(db_session, org_id)
    with pytest.raises(NotFound):
        commit_versioned(other_session, models.Organization, "Organization", org_id)


def test_update_against_deleted_row_is_not_found(
    db_session, other_session, organization_factory, user_factory, protocol_factory
):
    user = user_factory(organization_factory())
    user_id = user.id
    protocol_id = protocol_factory(user).id
    token = repo_protocols.get_protocol(other_session, protocol_id).version

    repo_protocols.delete_protocol(db_session, protocol_id)
    with pytest.raises(NotFound) as exc:
        repo_protocols.update_protocol(
            other_session,
            protocol_id,
            {"id": protocol_id, "version": token, "user_id": user_id, "is_draft": False},
        )
    assert exc.value.entity == "Protocol"


def test_session_usable_after_conflict(db_session, other_session, organization_factory):
    org_id = organization_factory().id
    repo_orgs.update_organization(db_session, org_id, _org("Fresh", 1, org_id))
    with pytest.raises(ConcurrencyConflict):
        repo_orgs.update_organization(other_session, org_id, _org("Stale", 1, org_id))

    # Re-fetch and retry with the current token
    current = repo_orgs.get_organization(other_session, org_id)
    repo_orgs.update_organization(other_session, org_id, _org("Retried", current.version, org_id))
    assert repo_orgs.get_organization(db_session, org_id).name == "Retried"
