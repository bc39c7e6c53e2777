"""Jinja2 rendering of page fragments."""

import logging
from typing import Any, Mapping, Optional

from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError, TemplateNotFound

from backoffice.core.exceptions import TemplateRenderError
from backoffice.services.localization import Translator

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".html"


def template_path(template_id: str) -> str:
    """Map a template id to a file path.

    ``component:handler:view`` ids map to ``component/handler/view.html``;
    ids that already look like paths are returned unchanged.
    """
    if ":" in template_id:
        return "/".join(part.lower() for part in template_id.split(":")) + TEMPLATE_SUFFIX
    return template_id


class TemplateRenderer:
    """Render templates to markup strings."""

    def __init__(self, directory: str, translator: Optional[Translator] = None):
        self.templates = Jinja2Templates(directory=directory)
        if translator is not None:
            self.templates.env.globals["trans"] = translator.translate

    def render(self, template_id: str, params: Optional[Mapping[str, Any]] = None) -> str:
        path = template_path(template_id)
        try:
            template = self.templates.get_template(path)
            return template.render(**dict(params or {}))
        except TemplateNotFound as e:
            logger.error(f"Template not found: {path}")
            raise TemplateRenderError(template_id, "template not found") from e
        except TemplateError as e:
            logger.error(f"Failed to render template {path}: {e}", exc_info=True)
            raise TemplateRenderError(template_id, str(e)) from e
