import logging
import logging.handlers
from pathlib import Path

import pytest

from licdash.common.config import Config
from licdash.common.crypto import CryptoUtils
from licdash.common.logging_config import setup_logging
from licdash.server.core import DashboardServer


def test_config_defaults() -> None:
    config = Config()
    assert config.TOKEN_ALGORITHM == "HS256"
    assert config.TOKEN_TTL == 3600
    assert config.TOKEN_LEEWAY == 0
    assert config.COOKIE_NAME == "token"
    assert config.SET_COOKIE is True
    assert config.COOKIE_SECURE is False
    assert config.ADMIN_USERNAME == "admin"
    assert config.DEFAULT_PER_PAGE == 20
    assert config.MAX_PER_PAGE == 100
    assert config.OVERSHARE_DEVICE_LIMIT == 2
    assert config.SERVER_URL == "http://127.0.0.1:8989"
    assert config.DATA_FILE_PATH is None
    assert config.LOG_LEVEL == logging.INFO


def test_config_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("LICDASH_TOKEN_TTL", "60")
    monkeypatch.setenv("LICDASH_COOKIE_SECURE", "true")
    monkeypatch.setenv("LICDASH_SERVER_PORT", "9000")
    monkeypatch.setenv("LICDASH_DATA_FILE", str(tmp_path / "data.json"))
    monkeypatch.setenv("LICDASH_LOG_LEVEL", "debug")

    config = Config()

    assert config.TOKEN_TTL == 60
    assert config.COOKIE_SECURE is True
    assert config.SERVER_URL == "http://127.0.0.1:9000"
    assert config.DATA_FILE_PATH == tmp_path / "data.json"
    assert config.LOG_LEVEL == logging.DEBUG


def test_secret_key_from_env(monkeypatch) -> None:
    monkeypatch.setenv("LICDASH_SECRET_KEY", "from-env")
    assert Config().get_secret_key() == b"from-env"


def test_missing_secret_key(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("LICDASH_SECRET_KEY_FILE", str(tmp_path / "absent.key"))
    with pytest.raises(ValueError, match="licdash keygen"):
        Config().get_secret_key()


def test_empty_secret_key_file(monkeypatch, tmp_path) -> None:
    path = tmp_path / "empty.key"
    path.write_text("\n")
    monkeypatch.setenv("LICDASH_SECRET_KEY_FILE", str(path))
    with pytest.raises(ValueError, match="empty"):
        Config().get_secret_key()


def test_server_overrides(secret_key: bytes, tmp_path) -> None:
    server = DashboardServer(
        secret_key=secret_key,
        token_ttl=60,
        max_per_page=10,
        overshare_device_limit=6,
        revoked_licenses_file_path=str(tmp_path / "revoked.json"),
    )
    assert server.token_ttl == 60
    assert server.issuer.ttl == 60
    assert server.pagination.max_per_page == 10
    assert [lic.id for lic in server.store.overshared_licenses()] == ["lic-005"]
    assert isinstance(server.revoked_licenses_file_path, Path)


def test_server_rejects_unknown_override(secret_key: bytes) -> None:
    with pytest.raises(TypeError):
        DashboardServer(secret_key=secret_key, session_ttl=30)


def test_server_loads_data_file(secret_key: bytes, tmp_path) -> None:
    path = tmp_path / "dataset.json"
    path.write_text('{"licenses": [], "publications": []}')

    server = DashboardServer(secret_key=secret_key, data_file_path=path)

    assert server.store.all_licenses() == []
    assert server.store.snapshot().total_publications == 0


def test_server_accepts_password_hash(secret_key: bytes) -> None:
    server = DashboardServer(
        secret_key=secret_key,
        admin_password_hash=CryptoUtils.hash_password("hashed-pw"),
    )
    assert server.verifier.password_hash.startswith("scrypt$")


def test_setup_logging_with_file(tmp_path, monkeypatch) -> None:
    log_file = tmp_path / "logs" / "licdash.log"
    monkeypatch.setenv("LICDASH_LOG_FILE", str(log_file))

    logger = setup_logging(Config())

    assert logger.name == "licdash"
    assert any(
        isinstance(handler, logging.handlers.RotatingFileHandler)
        for handler in logger.handlers
    )
    assert log_file.parent.is_dir()
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
