"""Configuration and logging setup.

Values come from the environment; a ``.env`` file in the project root is
loaded first when present.
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

load_dotenv(_PROJECT_ROOT / ".env")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    seed_path: Path = _PROJECT_ROOT / "data" / "seed.json"
    demo_mode: bool = False
    currency: str = "IDR"
    default_period: str = "month"
    log_level: str = "INFO"

    @field_validator("default_period")
    @classmethod
    def _known_period(cls, v: str) -> str:
        if v not in ("today", "week", "month", "year"):
            raise ValueError(f"default period must be today, week, month or year, got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def get_settings() -> Settings:
    return Settings(
        seed_path=Path(os.getenv("MONEYFLOW_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json")),
        demo_mode=_env_flag("MONEYFLOW_DEMO_MODE"),
        currency=os.getenv("MONEYFLOW_CURRENCY", "IDR"),
        default_period=os.getenv("MONEYFLOW_DEFAULT_PERIOD", "month"),
        log_level=os.getenv("MONEYFLOW_LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
