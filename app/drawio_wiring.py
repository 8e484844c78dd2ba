from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from adapters.layout.nested import NestedLayoutEngine
from app.config import GeneratorSettings
from domain.models import Architecture
from domain.services.convert_architecture_to_drawio import (
    ArchitectureToDrawioConverter,
    DocumentOptions,
)


def build_converter(settings: GeneratorSettings | None = None) -> ArchitectureToDrawioConverter:
    options = settings.to_document_options() if settings is not None else DocumentOptions()
    return ArchitectureToDrawioConverter(NestedLayoutEngine(), options)


def generate(
    architecture: Architecture | Mapping[str, Any],
    options: DocumentOptions | None = None,
) -> str:
    """Render an architecture as draw.io XML.

    Every call builds its own layout engine and page state, so repeated calls
    with the same input return identical text.
    """
    if not isinstance(architecture, Architecture):
        architecture = Architecture.model_validate(architecture)
    converter = ArchitectureToDrawioConverter(NestedLayoutEngine(), options)
    return converter.convert(architecture).to_xml()
