from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.datetime_utils import format_display_date
from .config import get_settings_module
from .container import Container, build_container
from .users.controller import register as register_users


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if app.config["DEBUG"]:
        app.logger.info(
            "[attendance-tracker] settings=%s base=%s tables=%s/%s",
            settings_module,
            getattr(settings, "AIRTABLE_BASE_ID", "?"),
            getattr(settings, "PARTICIPANTS_TABLE", "?"),
            getattr(settings, "ATTENDANCE_TABLE", "?"),
        )

    container = container or build_container(settings=settings)
    app.permanent_session_lifetime = container.session_lifetime
    app.add_template_filter(format_display_date, "display_date")

    register_users(app, container)
    register_attendance(app, container)

    return app
