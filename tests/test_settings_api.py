"""Tests for configuration storage and the settings endpoints."""

import json

import metacat.config as config
import metacat.logger as logger_module
from metacat.core import database as db
from tests.conftest import basic_auth


class TestConfigStorage:

    def test_defaults_saved_when_missing(self, database):
        assert db.get_app_config("config") is None
        loaded = config.load_config()
        assert loaded == config.DEFAULT_CONFIG
        assert json.loads(db.get_app_config("config")) == config.DEFAULT_CONFIG

    def test_corrupted_config_is_replaced(self, database):
        db.set_app_config("config", "{not json")
        assert config.load_config() == config.DEFAULT_CONFIG
        assert json.loads(db.get_app_config("config")) == config.DEFAULT_CONFIG

    def test_missing_keys_filled_from_defaults(self, database):
        db.set_app_config("config", json.dumps({"log_mode": "debug"}))
        loaded = config.load_config()
        assert loaded["log_mode"] == "debug"
        assert loaded["webapp_dir"] is None

    def test_default_webapp_dir_is_package(self, database):
        assert config.get_webapp_dir() == config.BASE_DIR

    def test_validate_config(self, tmp_path):
        assert config.validate_config({"log_mode": "info", "webapp_dir": str(tmp_path)}) is None
        assert "log_mode" in config.validate_config({"log_mode": "verbose"})
        assert "webapp_dir" in config.validate_config({"webapp_dir": str(tmp_path / "nope")})


class TestInitializeApp:

    def test_loads_bundled_default_language(self, db_file):
        config.initialize_app()
        languages = db.get_all_languages()
        assert [lang["id"] for lang in languages] == [config.DEFAULT_LANGUAGE]
        assert languages[0]["default"] is True
        assert db.count_labels(config.DEFAULT_LANGUAGE)["statusvaluesdes"] > 0

    def test_is_idempotent(self, db_file):
        config.initialize_app()
        config.initialize_app()
        assert db.count_users() == 1
        assert len(db.get_all_languages()) == 1


class TestSettingsApi:

    def test_requires_administrator(self, client, editor_headers):
        assert client.get("/api/settings").status_code == 401
        assert client.get("/api/settings", headers=editor_headers).status_code == 403

    def test_get(self, client, admin_headers, webapp_dir):
        response = client.get("/api/settings", headers=admin_headers)
        assert response.status_code == 200
        body = response.get_json()
        assert body["config"]["webapp_dir"] == str(webapp_dir)
        assert body["meta"]["webapp_dir"] == str(webapp_dir)
        assert body["meta"]["log_modes"] == ["off", "info", "debug"]

    def test_missing_config(self, client, admin_headers):
        response = client.put("/api/settings", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_invalid_log_mode(self, client, admin_headers):
        response = client.put("/api/settings", json={"config": {"log_mode": "loud"}}, headers=admin_headers)
        assert response.status_code == 400
        assert config.load_config()["log_mode"] == "off"

    def test_invalid_webapp_dir(self, client, admin_headers, tmp_path):
        response = client.put(
            "/api/settings",
            json={"config": {"webapp_dir": str(tmp_path / "missing")}},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_update_log_mode(self, client, admin_headers):
        response = client.put(
            "/api/settings",
            json={"config": {"log_mode": "info", "unknown_key": 1}},
            headers=admin_headers,
        )
        assert response.status_code == 200
        stored = config.load_config()
        assert stored["log_mode"] == "info"
        assert "unknown_key" not in stored
        assert logger_module._get_log_mode() == "info"

    def test_change_admin_password(self, client, admin_headers):
        response = client.put(
            "/api/settings",
            json={"config": {"admin_password": "s3cret"}},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert "admin_password" not in config.load_config()

        assert client.get("/api/settings", headers=admin_headers).status_code == 401
        new_headers = basic_auth(config.DEFAULT_ADMIN_USERNAME, "s3cret")
        assert client.get("/api/settings", headers=new_headers).status_code == 200

    def test_empty_admin_password_rejected(self, client, admin_headers):
        response = client.put(
            "/api/settings",
            json={"config": {"admin_password": ""}},
            headers=admin_headers,
        )
        assert response.status_code == 400


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_unknown_route_is_json(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.get_json()
