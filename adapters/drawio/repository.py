from __future__ import annotations

from pathlib import Path

from adapters.filesystem.json_utils import write_atomic
from domain.ports.repositories import DrawioRepository
from domain.services.convert_architecture_to_drawio import DrawioDocument

DRAWIO_SUFFIX = ".drawio"


class FileSystemDrawioRepository(DrawioRepository):
    def save(self, document: DrawioDocument, path: Path) -> None:
        write_atomic(path, document.to_xml().encode("utf-8"))

    def load_raw(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    @staticmethod
    def output_path(source: Path, output_dir: Path) -> Path:
        return output_dir / f"{source.stem}{DRAWIO_SUFFIX}"
