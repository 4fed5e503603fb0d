"""Template-related use cases."""

from .create_template import NewTemplateVersionData, create_template
from .delete_template import delete_template
from .get_template import get_template, get_template_by_name
from .list_templates import list_templates
from .render_template import RenderedContent, render_template
from .update_template import update_template

__all__ = [
    "NewTemplateVersionData",
    "RenderedContent",
    "create_template",
    "delete_template",
    "get_template",
    "get_template_by_name",
    "list_templates",
    "render_template",
    "update_template",
]
