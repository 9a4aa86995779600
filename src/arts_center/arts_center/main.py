from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import build_container
from .database.bootstrap import apply_schema, list_tables
from .enrollments.controller import register as register_enrollments
from .finance.controller import register as register_finance
from .payments.controller import register as register_payments

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container=None) -> Flask:
    """Application factory; pass `container` to run against other repositories."""

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if app.config["DEBUG"]:
            print(
                "[arts-center] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            if app.config["DEBUG"]:
                print(f"[arts-center] schema ready (tables={len(list_tables(db_config))})")

        container = build_container(
            db_config=db_config,
            proration_policy=getattr(settings, "PRORATION_POLICY", "cutoff_day"),
            proration_cutoff_day=int(getattr(settings, "PRORATION_CUTOFF_DAY", 15)),
            page_fetch_workers=int(getattr(settings, "PAGE_FETCH_WORKERS", 5)),
        )

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_attendance(app, container)
    register_enrollments(app, container)
    register_finance(app, container)
    register_payments(app, container)

    return app
