from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def strip_line_comments(content: str) -> str:
    """Drop `//` comments that sit outside JSON strings."""
    result_lines: list[str] = []
    for line in content.splitlines():
        in_string = False
        escaped = False
        cleaned: list[str] = []
        for idx, char in enumerate(line):
            if char == '"' and not escaped:
                in_string = not in_string
            if not in_string and char == "/" and line[idx + 1 : idx + 2] == "/":
                break
            cleaned.append(char)
            escaped = char == "\\" and not escaped
        result_lines.append("".join(cleaned))
    return "\n".join(result_lines)


def load_json_object(raw: bytes) -> dict[str, Any]:
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        data = orjson.loads(strip_line_comments(raw.decode("utf-8")))
    if not isinstance(data, dict):
        msg = f"Expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)
    return data


def dump_json_bytes(payload: Any) -> bytes:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_APPEND_NEWLINE)


def write_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(content)
    tmp_path.replace(path)
