"""Shared fixtures: a throwaway database, setup scripts and a test client."""

import base64
import logging

import pytest
from werkzeug.security import generate_password_hash

import metacat.config as config
import metacat.logger as logger_module
from metacat.core import database as db
from metacat.core.schema import initialize_database
from metacat.security import Profile


ENG_SCRIPT = """\
INSERT INTO languages (id, name, isinspire, isdefault) VALUES ('eng', 'English', 'y', 'y');
INSERT INTO categoriesdes (iddes, langid, label) VALUES (1, 'eng', 'Maps & graphics');
INSERT INTO categoriesdes (iddes, langid, label) VALUES (2, 'eng', 'Datasets');
INSERT INTO groupsdes (iddes, langid, label) VALUES (1, 'eng', 'All');
"""

FRE_SCRIPT = """\
-- French labels
INSERT INTO languages (id, name, isinspire, isdefault) VALUES ('fre', 'Français', 'y', 'n');

INSERT INTO categoriesdes (iddes, langid, label)
    VALUES (1, 'fre', 'Cartes & graphiques');
INSERT INTO categoriesdes (iddes, langid, label) VALUES (2, 'fre', 'Jeux de données');
INSERT INTO groupsdes (iddes, langid, label) VALUES (1, 'fre', 'Tous');
"""

# Second statement references a missing table
BROKEN_SCRIPT = """\
INSERT INTO languages (id, name, isinspire, isdefault) VALUES ('bad', 'Broken', 'n', 'n');
INSERT INTO missingdes (iddes, langid, label) VALUES (1, 'bad', 'Nope');
"""

# Labels only, no languages row
LABELS_ONLY_SCRIPT = """\
INSERT INTO groupsdes (iddes, langid, label) VALUES (1, 'xyz', 'Xyz');
"""

DELETE_TEMPLATE = """\
-- language removal
DELETE FROM categoriesdes WHERE langid = '%s';
DELETE FROM groupsdes WHERE langid = '%s';
DELETE FROM operationsdes WHERE langid = '%s';
DELETE FROM statusvaluesdes WHERE langid = '%s';

DELETE FROM languages WHERE id = '%s';
"""


def basic_auth(username: str, password: str) -> dict:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    """Point the database and log file at tmp_path, with logging off."""
    path = tmp_path / "metacat.db"
    monkeypatch.setattr(db, "DB_FILE", path)
    monkeypatch.setattr(logger_module, "LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(logger_module, "LOG_FILE", tmp_path / "logs" / "app.log")
    monkeypatch.setattr(logger_module, "_log_mode_cache", "off")
    yield path
    # Drop any handler a test switched on
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("metacat"):
            logger_module._apply_log_mode(logging.getLogger(name), "off")


@pytest.fixture
def database(db_file):
    """An initialised, empty database."""
    initialize_database()
    return db_file


@pytest.fixture
def webapp_dir(tmp_path):
    """A webapp directory holding setup scripts."""
    root = tmp_path / "webapp"
    data_dir = root / "setup" / "sql" / "data"
    template_dir = root / "setup" / "sql" / "template"
    data_dir.mkdir(parents=True)
    template_dir.mkdir(parents=True)

    (data_dir / "loc-eng-default.sql").write_text(ENG_SCRIPT, encoding="utf-8")
    (data_dir / "loc-fre-default.sql").write_text(FRE_SCRIPT, encoding="utf-8")
    (data_dir / "loc-bad-default.sql").write_text(BROKEN_SCRIPT, encoding="utf-8")
    (data_dir / "loc-emp-default.sql").write_text("", encoding="utf-8")
    (data_dir / "loc-xyz-default.sql").write_text(LABELS_ONLY_SCRIPT, encoding="utf-8")
    (template_dir / "language-delete.sql").write_text(DELETE_TEMPLATE, encoding="utf-8")
    return root


@pytest.fixture
def app(db_file, webapp_dir):
    from metacat.web import create_app

    config.save_config({"log_mode": "off", "webapp_dir": str(webapp_dir)})
    app = create_app()
    app.config["TESTING"] = True

    db.create_user("editor", generate_password_hash("editor"), Profile.EDITOR.value)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return basic_auth(config.DEFAULT_ADMIN_USERNAME, config.DEFAULT_ADMIN_PASSWORD)


@pytest.fixture
def editor_headers():
    return basic_auth("editor", "editor")
