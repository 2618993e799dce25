from pathlib import Path

import pytest

import payment_gateway.main
from payment_gateway.config import ConfigError, load_settings

CONFIG_VARS = (
    "STRIPE_SECRET_KEY", "HOST", "PORT", "LEDGER_FILE", "CURRENCY",
    "CORS_ORIGINS", "LEDGER_LOCK", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("payment_gateway.config.ENV_PATH", tmp_path / ".env")


def test_defaults(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")

    settings = load_settings()

    assert settings.stripe_secret_key == "sk_test_123"
    assert settings.port == 4242
    assert settings.ledger_file == Path("pedidos.json")
    assert settings.currency == "clp"
    assert settings.cors_origins == ["*"]
    assert settings.ledger_lock is True
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LEDGER_FILE", "data/orders.json")
    monkeypatch.setenv("CORS_ORIGINS", "https://bigfood.cl, http://localhost:3000")
    monkeypatch.setenv("LEDGER_LOCK", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.port == 8080
    assert settings.ledger_file == Path("data/orders.json")
    assert settings.cors_origins == ["https://bigfood.cl", "http://localhost:3000"]
    assert settings.ledger_lock is False
    assert settings.log_level == "DEBUG"


def test_reads_env_file(tmp_path):
    (tmp_path / ".env").write_text("STRIPE_SECRET_KEY=sk_from_file\nPORT=9000\n", encoding="utf-8")

    settings = load_settings()

    assert settings.stripe_secret_key == "sk_from_file"
    assert settings.port == 9000


@pytest.mark.parametrize("env", [
    {},
    {"STRIPE_SECRET_KEY": ""},
    {"STRIPE_SECRET_KEY": "sk_test_123", "PORT": "abc"},
    {"STRIPE_SECRET_KEY": "sk_test_123", "LOG_LEVEL": "VERBOSE"},
])
def test_invalid_configuration(monkeypatch, env):
    for name, value in env.items():
        monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        load_settings()


def test_run_exits_without_secret_key(mocker):
    serve = mocker.patch("payment_gateway.main.uvicorn.run")

    with pytest.raises(SystemExit) as exc:
        payment_gateway.main.run()

    assert exc.value.code == 1
    serve.assert_not_called()


def test_run_exits_on_unknown_log_level(monkeypatch, mocker):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
    serve = mocker.patch("payment_gateway.main.uvicorn.run")

    with pytest.raises(SystemExit) as exc:
        payment_gateway.main.run()

    assert exc.value.code == 1
    serve.assert_not_called()


def test_run_serves_on_configured_port(monkeypatch, mocker):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("PORT", "5000")
    serve = mocker.patch("payment_gateway.main.uvicorn.run")

    payment_gateway.main.run()

    serve.assert_called_once()
    assert serve.call_args.kwargs["port"] == 5000
