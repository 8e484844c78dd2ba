from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from domain.models import Architecture
from domain.services.convert_architecture_to_drawio import DrawioDocument


class ArchitectureRepository(Protocol):
    def load_all_with_paths(self, directory: Path) -> Sequence[tuple[Path, Architecture]]: ...

    def load_by_path(self, path: Path) -> Architecture: ...

    def load_raw(self, path: Path) -> bytes: ...

    def save(self, architecture: Architecture, path: Path) -> None: ...


class DrawioRepository(Protocol):
    def save(self, document: DrawioDocument, path: Path) -> None: ...

    def load_raw(self, path: Path) -> str: ...
