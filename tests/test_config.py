import pytest
from pydantic import ValidationError

from moneyflow.config import get_settings

ENV_VARS = (
    "MONEYFLOW_SEED_PATH",
    "MONEYFLOW_DEMO_MODE",
    "MONEYFLOW_CURRENCY",
    "MONEYFLOW_DEFAULT_PERIOD",
    "MONEYFLOW_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.demo_mode is False
    assert settings.currency == "IDR"
    assert settings.default_period == "month"
    assert settings.log_level == "INFO"
    assert settings.seed_path.parts[-2:] == ("data", "seed.json")


def test_values_from_env(clean_env, tmp_path):
    clean_env.setenv("MONEYFLOW_SEED_PATH", str(tmp_path / "seed.json"))
    clean_env.setenv("MONEYFLOW_DEMO_MODE", "true")
    clean_env.setenv("MONEYFLOW_CURRENCY", "USD")
    clean_env.setenv("MONEYFLOW_DEFAULT_PERIOD", "week")
    clean_env.setenv("MONEYFLOW_LOG_LEVEL", "debug")

    settings = get_settings()
    assert settings.seed_path == tmp_path / "seed.json"
    assert settings.demo_mode is True
    assert settings.currency == "USD"
    assert settings.default_period == "week"
    assert settings.log_level == "DEBUG"


def test_unknown_default_period(clean_env):
    clean_env.setenv("MONEYFLOW_DEFAULT_PERIOD", "decade")
    with pytest.raises(ValidationError):
        get_settings()
