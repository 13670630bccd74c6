import pytest

from protocol_service.db import models
from protocol_service.db.errors import ForeignKeyViolation, NotFound, ValidationError
from protocol_service.db.repositories import organizations as repo_orgs
from protocol_service.db.repositories import protocol_templates as repo_templates


def test_template_lifecycle(db_session, other_session, organization_factory):
    org = organization_factory()
    created = repo_templates.create_protocol_template(
        db_session,
        {"name": "Intake", "template": "{}", "description": "intake form", "organization_id": org.id},
    )
    template_id = created.id
    assert repo_templates.protocol_template_exists(db_session, template_id)

    repo_templates.update_protocol_template(
        db_session,
        template_id,
        {"id": template_id, "version": 1, "name": "Intake v2", "template": "{\"v\": 2}", "organization_id": org.id},
    )
    fetched = repo_templates.get_protocol_template(other_session, template_id)
    assert fetched.name == "Intake v2"
    assert fetched.description is None
    assert fetched.version == 2

    repo_templates.delete_protocol_template(db_session, template_id)
    with pytest.raises(NotFound):
        repo_templates.get_protocol_template(db_session, template_id)


def test_template_requires_organization_and_text(db_session, organization_factory):
    with pytest.raises(ForeignKeyViolation):
        repo_templates.create_protocol_template(db_session, {"name": "X", "template": "{}", "organization_id": 5})
    org = organization_factory()
    with pytest.raises(ValidationError) as exc:
        repo_templates.create_protocol_template(db_session, {"name": "X", "template": "", "organization_id": org.id})
    assert exc.value.field == "template"
    assert db_session.query(models.ProtocolTemplate).count() == 0


def test_templates_removed_with_organization(db_session, organization_factory):
    org = organization_factory()
    org_id = org.id
    repo_templates.create_protocol_template(db_session, {"name": "A", "template": "{}", "organization_id": org_id})
    repo_templates.create_protocol_template(db_session, {"name": "B", "template": "{}", "organization_id": org_id})
    assert [t.name for t in repo_templates.list_protocol_templates_for_organization(db_session, org_id)] == ["A", "B"]

    repo_orgs.delete_organization(db_session, org_id)
    assert repo_templates.list_protocol_templates(db_session) == []


def test_update_missing_template_is_not_found(db_session, organization_factory):
    org = organization_factory()
    with pytest.raises(NotFound) as exc:
        repo_templates.update_protocol_template(
            db_session,
            31,
            {"id": 31, "version": 1, "name": "X", "template": "{}", "organization_id": org.id},
        )
    assert exc.value.entity == "ProtocolTemplate"
