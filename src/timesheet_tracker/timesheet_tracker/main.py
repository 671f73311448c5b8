from __future__ import annotations

import atexit
import importlib
import logging
from datetime import timedelta
from pathlib import Path
from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .assignments.controller import register as register_assignments
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .notifications.dispatcher import BackgroundNotifier, Notifier, SynchronousNotifier
from .notifications.sender import DisabledNotificationSender, NotificationSender, SmtpNotificationSender, SmtpSettings
from .projects.controller import register as register_projects
from .reports.controller import register as register_reports
from .timesheets.controller import register as register_timesheets
from .users.controller import register as register_users
from .web.errors import register_error_handlers
from .web.guards import CONTAINER_KEY

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_sender(settings: ModuleType) -> NotificationSender:
    host = getattr(settings, "SMTP_HOST", "")
    if not host:
        return DisabledNotificationSender()
    return SmtpNotificationSender(
        SmtpSettings(
            host=host,
            port=int(getattr(settings, "SMTP_PORT", 587)),
            username=getattr(settings, "SMTP_USER", "") or None,
            password=getattr(settings, "SMTP_PASSWORD", "") or None,
            use_tls=bool(getattr(settings, "SMTP_USE_TLS", True)),
            sender=getattr(settings, "NOTIFICATION_SENDER"),
            recipient=getattr(settings, "ADMIN_NOTIFICATION_EMAIL"),
        )
    )


def build_notifier(settings: ModuleType) -> Notifier:
    sender = build_sender(settings)
    if not getattr(settings, "NOTIFICATIONS_IN_BACKGROUND", True):
        return SynchronousNotifier(sender)
    notifier = BackgroundNotifier(sender)
    notifier.start()
    atexit.register(notifier.shutdown)
    return notifier


def _bootstrap_database(app: Flask, settings: ModuleType, db_config: DBConfig) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
        app.logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
        ensure_demo_users(db_config)
        app.logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Passing a container skips the database bootstrap and the notifier setup;
    tests use this with in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(REPO_ROOT / "templates"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", 7)))

    if container is None:
        db_config = DBConfig.from_mapping(getattr(settings, "DB_CONFIG"))
        app.logger.info("settings=%s db=%s", settings_module, db_config.describe())
        _bootstrap_database(app, settings, db_config)
        container = build_container(db_config=db_config, notifier=build_notifier(settings))

    app.extensions[CONTAINER_KEY] = container

    register_error_handlers(app)
    register_users(app, container)
    register_projects(app, container)
    register_assignments(app, container)
    register_timesheets(app, container)
    register_reports(app, container)

    return app
