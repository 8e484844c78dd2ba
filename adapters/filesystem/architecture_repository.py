from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from adapters.filesystem.json_utils import dump_json_bytes, load_json_object, write_atomic
from domain.models import Architecture
from domain.ports.repositories import ArchitectureRepository


class FileSystemArchitectureRepository(ArchitectureRepository):
    def load_all_with_paths(self, directory: Path) -> list[tuple[Path, Architecture]]:
        return [(path, self.load_by_path(path)) for path in sorted(self._iter_paths(directory))]

    def load_by_path(self, path: Path) -> Architecture:
        return Architecture.model_validate(load_json_object(self.load_raw(path)))

    def load_raw(self, path: Path) -> bytes:
        return path.read_bytes()

    def save(self, architecture: Architecture, path: Path) -> None:
        payload = architecture.model_dump(mode="json", by_alias=True, exclude_none=True)
        write_atomic(path, dump_json_bytes(payload))

    def _iter_paths(self, directory: Path) -> Iterable[Path]:
        yield from directory.glob("*.json")
