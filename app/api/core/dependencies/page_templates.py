from datetime import datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.api.core.config import BASE_DIR, settings
from app.api.utils.validators import EMAIL_PATTERN

TEMPLATE_DIR = Path(BASE_DIR) / "app/api/core/dependencies/templates"
page_templates = Jinja2Templates(directory=str(TEMPLATE_DIR))

page_templates.env.globals["APP_NAME"] = settings.APP_NAME
page_templates.env.globals["APP_URL"] = settings.APP_URL
page_templates.env.globals["SHARE_URL"] = settings.SHARE_URL
page_templates.env.globals["SHARE_TEXT"] = settings.SHARE_TEXT
page_templates.env.globals["EMAIL_PATTERN"] = EMAIL_PATTERN.pattern
page_templates.env.globals["current_year"] = datetime.now().year
