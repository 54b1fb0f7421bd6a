"""
Unit Tests - Settings
=====================
Environment parsing for the role allow-lists and logging options.
"""
import logging

import pytest
from pydantic import ValidationError

from resolve360.config import Settings
from resolve360.services.catalog import DEFAULT_ADMIN_EMAILS, load_routing_config
from resolve360.utils.logging_config import setup_logging


@pytest.fixture
def env(monkeypatch):
    for name in ("ADMIN_EMAILS", "CONTRACTOR_EMAILS", "ALLOWED_ORIGINS", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def load(**kwargs):
    return Settings(_env_file=None, **kwargs)


def test_comma_separated_allow_list(env):
    env.setenv("ADMIN_EMAILS", "Boss@MapleCourt.org, chief@maplecourt.org")
    env.setenv("CONTRACTOR_EMAILS", "fixit@maplecourt.org")
    settings = load()
    assert settings.admin_emails == ["Boss@MapleCourt.org", "chief@maplecourt.org"]
    assert settings.contractor_emails == ["fixit@maplecourt.org"]


def test_json_allow_list(env):
    env.setenv("ADMIN_EMAILS", '["boss@maplecourt.org", "chief@maplecourt.org"]')
    assert load().admin_emails == ["boss@maplecourt.org", "chief@maplecourt.org"]


def test_empty_allow_list_keeps_built_in_one(env):
    env.setenv("ADMIN_EMAILS", "")
    settings = load()
    assert settings.admin_emails == []
    assert load_routing_config(settings).admin_emails == frozenset(DEFAULT_ADMIN_EMAILS)


def test_allow_list_reaches_routing_config(env):
    env.setenv("ADMIN_EMAILS", "Boss@MapleCourt.org,chief@maplecourt.org")
    config = load_routing_config(load())
    assert config.admin_emails == frozenset({"boss@maplecourt.org", "chief@maplecourt.org"})


def test_comma_separated_origins(env):
    env.setenv("ALLOWED_ORIGINS", "https://desk.maplecourt.org,http://localhost:3000")
    assert load().allowed_origins == ["https://desk.maplecourt.org", "http://localhost:3000"]


def test_malformed_json_list_rejected(env):
    env.setenv("ADMIN_EMAILS", '["boss@maplecourt.org"')
    with pytest.raises(ValidationError):
        load()


def test_log_file_handler(env, tmp_path):
    log_file = tmp_path / "logs" / "api.log"
    env.setenv("LOG_FILE", str(log_file))
    settings = load()

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(settings.log_level, settings.log_file)
        logging.getLogger("resolve360.test").warning("written to file")
        for handler in root.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            if isinstance(handler, logging.FileHandler):
                handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
