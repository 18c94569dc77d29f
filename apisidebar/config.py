"""
Runtime configuration for apisidebar.

Values come from the environment (a `.env` file is loaded if one is found
up the directory tree); CLI options override them. Blank values fall back
to the defaults.

    APISIDEBAR_DOC_PREFIX      docs folder of generated pages (default: openapi)
    APISIDEBAR_SIDEBAR_NAME    SidebarsConfig key (default: apisidebar)
    APISIDEBAR_UNTAGGED_LABEL  category for untagged operations (default: UNTAGGED)
    APISIDEBAR_LABEL_SOURCE    operation_id | summary (default: operation_id)
    APISIDEBAR_LOG_LEVEL       logging level name (default: WARNING)
"""

from typing import Literal

from dotenv import load_dotenv, find_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(find_dotenv(usecwd=True))

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class SidebarSettings(BaseSettings):
    """Defaults for sidebar generation (``APISIDEBAR_*``)."""

    model_config = SettingsConfigDict(env_prefix="APISIDEBAR_", env_file=".env", extra="ignore")

    doc_prefix: str = Field(default="openapi", description="Docs folder of the generated pages")
    sidebar_name: str = Field(default="apisidebar", description="SidebarsConfig key")
    untagged_label: str = Field(default="UNTAGGED", description="Category for untagged operations")
    label_source: Literal["operation_id", "summary"] = Field(default="operation_id")
    log_level: str = Field(default="WARNING", description="Logging level name")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        """Strip string values; blank ones are removed so the defaults apply."""
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            cleaned[key] = value
        return cleaned

    @field_validator('log_level')
    @classmethod
    def known_level(cls, v):
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level
