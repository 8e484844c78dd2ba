from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from domain.models import DEFAULT_TITLE
from domain.services.convert_architecture_to_drawio import DocumentOptions

DEFAULT_CONFIG_PATH = Path("config/app.yaml")
CONFIG_PATH_ENV = "AZARCH_CONFIG_PATH"


class GeneratorSettings(BaseModel):
    input_dir: Path = Path("examples/architecture")
    output_dir: Path = Path("data/drawio_out")
    host: str = "app.diagrams.net"
    agent: str = "az-arch-gen"
    default_title: str = DEFAULT_TITLE
    pretty_print: bool = False
    log_level: str = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in logging.getLevelNamesMapping():
            msg = f"Unknown log level: {value!r}"
            raise ValueError(msg)
        return level

    @field_validator("default_title", mode="before")
    @classmethod
    def ensure_default_title(cls, value: object) -> str:
        title = str(value or "").strip()
        return title or DEFAULT_TITLE

    def to_document_options(self) -> DocumentOptions:
        return DocumentOptions(
            host=self.host,
            agent=self.agent,
            default_title=self.default_title,
            pretty_print=self.pretty_print,
        )


class WebSettings(BaseModel):
    title: str = "Azure Architecture Diagram Generator"
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="AZARCH_", env_nested_delimiter="__")

    generator: GeneratorSettings = GeneratorSettings()
    web: WebSettings = WebSettings()

    _yaml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings, dotenv_settings]
        if cls._yaml_path:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls._yaml_path))
        sources.append(file_secret_settings)
        return tuple(sources)


def load_settings(config_path: Path | None = None) -> AppSettings:
    env_path = os.getenv(CONFIG_PATH_ENV)
    resolved_path: Path | None = None

    if config_path is not None:
        resolved_path = config_path
    elif env_path:
        resolved_path = Path(env_path)
    elif DEFAULT_CONFIG_PATH.exists():
        resolved_path = DEFAULT_CONFIG_PATH

    previous = AppSettings._yaml_path
    try:
        if resolved_path is not None:
            if not resolved_path.exists():
                msg = f"Config file not found: {resolved_path}"
                raise FileNotFoundError(msg)
            AppSettings._yaml_path = resolved_path
        return AppSettings()
    finally:
        AppSettings._yaml_path = previous
