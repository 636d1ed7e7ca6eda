from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import urlparse

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "evaluations.json"
DEFAULT_MAIL_SENDER = "noreply@mdp-survey.local"


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    data_file: Path
    mail_api_base: str | None
    mail_api_key: str | None
    mail_sender: str

    @property
    def notifications_enabled(self) -> bool:
        return self.mail_api_base is not None


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _require_url(name: str, value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise SettingsError(f"Invalid URL for {name}: {value}")
    return value


def load_settings() -> Settings:
    data_file = Path(_optional_env("SURVEY_DATA_FILE") or DEFAULT_DATA_FILE)
    mail_api_base = _optional_env("MAIL_API_BASE")
    mail_api_key = _optional_env("MAIL_API_KEY")
    if mail_api_base is not None:
        mail_api_base = _require_url("MAIL_API_BASE", mail_api_base)
        if mail_api_key is None:
            raise SettingsError(
                "Missing required environment variable: MAIL_API_KEY (required when MAIL_API_BASE is set)"
            )
    mail_sender = _optional_env("MAIL_SENDER") or DEFAULT_MAIL_SENDER

    return Settings(
        data_file=data_file,
        mail_api_base=mail_api_base,
        mail_api_key=mail_api_key,
        mail_sender=mail_sender,
    )
