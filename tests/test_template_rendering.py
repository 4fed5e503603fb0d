"""Tests for template management and rendering."""

from __future__ import annotations

import pytest

from notifyhub.application.use_cases.templates import (
    NewTemplateVersionData,
    create_template,
    delete_template,
    get_template_by_name,
    list_templates,
    render_template,
    update_template,
)
from notifyhub.domain.exceptions import NotFoundError, ValidationError


def _welcome_template(session, **overrides):
    values = {
        "name": "welcome",
        "versions": [
            NewTemplateVersionData(channel="sms", content="Hi {{name}}, code {{code}}"),
            NewTemplateVersionData(
                channel="email",
                subject="Welcome {{name}}",
                content="Hello {{ name }}",
                html="<p>Hello {{name}}</p>",
            ),
        ],
    }
    values.update(overrides)
    return create_template(session, **values)


def test_create_template_infers_parameters_from_placeholders(session):
    template = _welcome_template(session)

    sms_version = template.active_version("sms")
    assert sms_version.parameters == ["name", "code"]
    assert template.active_version("email").parameters == ["name"]
    assert template.display_name == "welcome"
    assert template.category == "transactional"


def test_create_template_rejects_duplicate_names(session):
    _welcome_template(session)

    with pytest.raises(ValidationError):
        _welcome_template(session)


def test_create_template_requires_a_version(session):
    with pytest.raises(ValidationError):
        create_template(session, name="empty", versions=[])


def test_render_sms_version_by_id(session):
    template = _welcome_template(session)

    rendered = render_template(session, template.id, "sms", {"name": "Ana", "code": 4242})

    assert rendered.text == "Hi Ana, code 4242"
    assert rendered.subject is None
    assert rendered.html is None


def test_render_email_version_by_name(session):
    _welcome_template(session)

    rendered = render_template(session, "welcome", "email", {"name": "Ana"})

    assert rendered.subject == "Welcome Ana"
    assert rendered.text == "Hello Ana"
    assert rendered.html == "<p>Hello Ana</p>"


def test_render_email_without_html_reuses_content(session):
    create_template(
        session,
        name="plain",
        versions=[NewTemplateVersionData(channel="email", subject="S", content="Body {{x}}")],
    )

    rendered = render_template(session, "plain", "email", {"x": 1})

    assert rendered.html == "Body 1"


def test_render_reports_every_missing_parameter(session):
    _welcome_template(session)

    with pytest.raises(ValidationError) as excinfo:
        render_template(session, "welcome", "sms", {})

    assert "name" in str(excinfo.value)
    assert "code" in str(excinfo.value)


def test_render_leaves_undeclared_placeholders_untouched(session):
    create_template(
        session,
        name="partial",
        versions=[
            NewTemplateVersionData(
                channel="sms", content="{{a}} and {{b}}", parameters=["a"]
            )
        ],
    )

    rendered = render_template(session, "partial", "sms", {"a": "x", "b": "y"})

    assert rendered.text == "x and {{b}}"


def test_render_without_active_version_for_channel(session):
    _welcome_template(session)

    with pytest.raises(NotFoundError):
        render_template(session, "welcome", "whatsapp", {"name": "Ana"})


def test_render_ignores_inactive_versions(session):
    create_template(
        session,
        name="retired",
        versions=[NewTemplateVersionData(channel="sms", content="old", active=False)],
    )

    with pytest.raises(NotFoundError):
        render_template(session, "retired", "sms", {})


def test_render_unknown_template(session):
    with pytest.raises(NotFoundError):
        render_template(session, "missing", "sms", {})


def test_update_template_replaces_versions(session):
    template = _welcome_template(session)

    updated = update_template(
        session,
        template.id,
        description="Onboarding",
        versions=[NewTemplateVersionData(channel="whatsapp", content="Oi {{name}}")],
    )

    assert updated.description == "Onboarding"
    assert [version.channel for version in updated.versions] == ["whatsapp"]
    assert render_template(session, template.id, "whatsapp", {"name": "Ana"}).text == "Oi Ana"


def test_update_template_rejects_name_taken_by_another_template(session):
    _welcome_template(session)
    other = _welcome_template(session, name="other")

    with pytest.raises(ValidationError):
        update_template(session, other.id, name="welcome")


def test_list_templates_filters_by_channel_and_search(session):
    _welcome_template(session)
    create_template(
        session,
        name="promo",
        category="marketing",
        description="Seasonal campaign",
        versions=[NewTemplateVersionData(channel="whatsapp", content="Sale!")],
    )

    assert [t.name for t in list_templates(session, channel="whatsapp").items] == ["promo"]
    assert [t.name for t in list_templates(session, search="campaign").items] == ["promo"]
    assert [t.name for t in list_templates(session, category="transactional").items] == [
        "welcome"
    ]
    assert list_templates(session).total == 2


def test_delete_template(session):
    template = _welcome_template(session)

    delete_template(session, template.id)

    with pytest.raises(NotFoundError):
        get_template_by_name(session, "welcome")
    with pytest.raises(NotFoundError):
        delete_template(session, template.id)
