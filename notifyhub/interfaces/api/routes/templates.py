"""Routes for managing and rendering message templates."""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.templates import (
    create_template as create_template_uc,
    delete_template as delete_template_uc,
    get_template as get_template_uc,
    list_templates as list_templates_uc,
    render_template as render_template_uc,
    update_template as update_template_uc,
)
from notifyhub.domain.entities import Template
from notifyhub.domain.exceptions import NotificationServiceError
from notifyhub.interfaces.api.dependencies import get_db
from notifyhub.interfaces.api.routes_helpers import entity_payload, to_http_exception
from notifyhub.interfaces.api.schemas import (
    RenderedContentRead,
    TemplateCreate,
    TemplatePage,
    TemplateRead,
    TemplateRenderRequest,
    TemplateUpdate,
)

router = APIRouter(prefix="/templates", tags=["templates"])


def _template_to_read_model(template: Template) -> TemplateRead:
    return TemplateRead.model_validate(entity_payload(template))


@router.post("", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def create_template(payload: TemplateCreate, db: Session = Depends(get_db)) -> TemplateRead:
    try:
        template = create_template_uc(
            db,
            name=payload.name,
            versions=[version.to_data() for version in payload.versions],
            display_name=payload.display_name,
            description=payload.description,
            category=payload.category,
            tags=payload.tags,
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.get("", response_model=TemplatePage)
def list_templates(
    category: str | None = None,
    channel: str | None = None,
    search: str | None = None,
    page: int = Query(default=1),
    limit: int = Query(default=20),
    db: Session = Depends(get_db),
) -> TemplatePage:
    try:
        result = list_templates_uc(
            db, category=category, channel=channel, search=search, page=page, limit=limit
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return TemplatePage(
        items=[_template_to_read_model(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.get("/{template_id}", response_model=TemplateRead)
def get_template(template_id: str, db: Session = Depends(get_db)) -> TemplateRead:
    try:
        template = get_template_uc(db, template_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.put("/{template_id}", response_model=TemplateRead)
def update_template(
    template_id: str, payload: TemplateUpdate, db: Session = Depends(get_db)
) -> TemplateRead:
    versions = None
    if payload.versions is not None:
        versions = [version.to_data() for version in payload.versions]
    try:
        template = update_template_uc(
            db,
            template_id,
            name=payload.name,
            display_name=payload.display_name,
            description=payload.description,
            category=payload.category,
            tags=payload.tags,
            versions=versions,
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _template_to_read_model(template)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        delete_template_uc(db, template_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{template_id}/render", response_model=RenderedContentRead)
def render_template(
    template_id: str, payload: TemplateRenderRequest, db: Session = Depends(get_db)
) -> RenderedContentRead:
    try:
        rendered = render_template_uc(db, template_id, payload.channel, payload.parameters)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return RenderedContentRead.model_validate(entity_payload(rendered))
