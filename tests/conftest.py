from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from app.config import AppSettings, GeneratorSettings
from domain.models import Architecture
from tests.helpers.architecture_fixtures import load_architecture


def _clear_azarch_env() -> None:
    for key in list(os.environ):
        if key.startswith("AZARCH_"):
            os.environ.pop(key, None)


_clear_azarch_env()


@pytest.fixture(autouse=True)
def clear_azarch_env() -> Generator[None, None, None]:
    _clear_azarch_env()
    yield
    _clear_azarch_env()


@pytest.fixture
def generator_settings(tmp_path: Path) -> GeneratorSettings:
    return GeneratorSettings(
        input_dir=tmp_path / "architecture",
        output_dir=tmp_path / "drawio_out",
        agent="az-arch-gen-tests",
        pretty_print=False,
        log_level="WARNING",
    )


@pytest.fixture
def app_settings(generator_settings: GeneratorSettings) -> AppSettings:
    return AppSettings(generator=generator_settings)


@pytest.fixture
def app_settings_factory(
    generator_settings: GeneratorSettings,
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(generator=generator_settings.model_copy(update=overrides))

    return _factory


@pytest.fixture
def three_tier() -> Architecture:
    return load_architecture("three_tier.json")


@pytest.fixture
def hub_spoke() -> Architecture:
    return load_architecture("hub_spoke.json")
