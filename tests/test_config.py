"""Configuration loading from WALLETLEDGER_* variables."""

from __future__ import annotations

import pytest

from walletledger import CONFIGS, create_app
from walletledger.config import BaseConfig, DevConfig, TestConfig


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_DATA_DIR", str(tmp_path))
    for name in ("DATABASE_URL", "IDENTITY_HEADER", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE"):
        monkeypatch.delenv(f"WALLETLEDGER_{name}", raising=False)

    config = BaseConfig()

    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'walletledger.db'}"
    assert config.IDENTITY_HEADER == "X-User-Id"
    assert (config.DEFAULT_PAGE_SIZE, config.MAX_PAGE_SIZE) == (10, 100)
    assert config.is_sqlite
    assert config.sqlalchemy_engine_options()["connect_args"] == {"check_same_thread": False}


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WALLETLEDGER_IDENTITY_HEADER", "X-Forwarded-User")
    monkeypatch.setenv("WALLETLEDGER_DEFAULT_PAGE_SIZE", "25")
    monkeypatch.setenv("WALLETLEDGER_DEV_MODE", "false")
    monkeypatch.setenv("WALLETLEDGER_SECRET_KEY", "s3cret")

    config = BaseConfig()

    assert config.IDENTITY_HEADER == "X-Forwarded-User"
    assert config.DEFAULT_PAGE_SIZE == 25
    assert config.DEV_MODE is False
    assert config.SECRET_KEY == "s3cret"


def test_production_requires_secret(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WALLETLEDGER_DEV_MODE", "0")
    monkeypatch.delenv("WALLETLEDGER_SECRET_KEY", raising=False)

    with pytest.raises(ValueError):
        BaseConfig()


def test_invalid_page_sizes(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("WALLETLEDGER_MAX_PAGE_SIZE", "5")

    with pytest.raises(ValueError):
        BaseConfig()


def test_test_config_ignores_database_url(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_DATABASE_URL", "postgresql://prod/db")

    config = TestConfig(data_dir=tmp_path)

    assert config.DATABASE_URL == f"sqlite:///{tmp_path / 'test.db'}"
    assert config.TESTING is True
    assert config.LOG_TO_FILE is False


def test_config_names():
    assert CONFIGS["development"] is DevConfig
    assert CONFIGS["testing"] is TestConfig
    with pytest.raises(ValueError):
        create_app("staging")


def test_custom_identity_header(monkeypatch, tmp_path):
    monkeypatch.setenv("WALLETLEDGER_IDENTITY_HEADER", "X-Principal")
    app = create_app(config=TestConfig(data_dir=tmp_path))
    services = app.extensions["walletledger"]
    user = services.users.ensure_user("proxy-user")
    client = app.test_client()

    assert client.get("/api/wallets", headers={"X-User-Id": str(user["id"])}).status_code == 401
    assert client.get("/api/wallets", headers={"X-Principal": str(user["id"])}).status_code == 200
    services.engine.dispose()
