import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://snulinks.snu.edu.in/"
DEFAULT_TIMEOUT_SECONDS = 20


class HarnessSettings(BaseSettings):
    """
    Automatically derives from SNULINKS_-prefixed environment variables and
    translates truthy/falsey strings into bools. The pytest plugin overlays
    any command-line options on top of these; see 'pytest_addoption()'.
    """

    model_config = SettingsConfigDict(env_prefix="SNULINKS_")

    base_url: str = DEFAULT_BASE_URL
    # One wait window shared by every condition checked within a session.
    timeout_seconds: int = Field(DEFAULT_TIMEOUT_SECONDS, ge=0)
    poll_frequency: float = Field(0.5, gt=0)
    headless: bool = False
    allow_remote_origins: bool = True
    selenium_server: Optional[str] = None
    use_driver_manager: bool = False
    screenshot_dir: str = os.path.join("target", "screenshots")
    report_dir: str = os.path.join("target", "smoke-report")

    @field_validator("*", mode="before")
    @classmethod
    def handle_empty_string(cls, v, info):
        if v == "":
            return cls.model_fields[info.field_name].default
        return v

    @field_validator("selenium_server")
    @classmethod
    def strip_selenium_server(cls, v):
        if v:
            return v.strip() or None
        return None
