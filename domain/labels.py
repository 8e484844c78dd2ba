from __future__ import annotations

import html
import re
from collections.abc import Mapping

from domain.models import Scalar

CAPTION_LIMIT = 3
# Fixed order; input order of the properties never matters.
_CAPTION_LABELS: tuple[tuple[str, str], ...] = (
    ("sku", "SKU"),
    ("tier", "Tier"),
    ("size", "Size"),
    ("vmSize", "Size"),
    ("addressSpace", "CIDR"),
    ("addressPrefix", "CIDR"),
    ("bandwidth", "BW"),
    ("capacity", "Cap"),
    ("replicaCount", "Replicas"),
    ("nodeCount", "Nodes"),
    ("version", "v"),
    ("kind", "Kind"),
)
RESERVED_ATTRIBUTES = frozenset({"id", "label", "placeholders"})

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_NAME_CHAR_RE = re.compile(r"[^A-Za-z0-9_.\-]")
# Characters XML 1.0 does not allow anywhere in a document.
_XML_ILLEGAL_RE = re.compile("[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


def xml_text(text: str) -> str:
    return _XML_ILLEGAL_RE.sub("", text)


def html_label(text: str) -> str:
    return html.escape(xml_text(text), quote=False).replace("\n", "<br>")


def format_scalar(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return xml_text(str(value))


def caption_entries(properties: Mapping[str, Scalar]) -> list[str]:
    entries: list[str] = []
    for key, label in _CAPTION_LABELS:
        value = properties.get(key)
        if value is None:
            continue
        entries.append(f"{label}: {format_scalar(value)}")
        if len(entries) == CAPTION_LIMIT:
            break
    return entries


def resource_label(name: str, properties: Mapping[str, Scalar]) -> str:
    label = html_label(name)
    entries = caption_entries(properties)
    if not entries:
        return label
    caption = html_label(" | ".join(entries))
    return f'{label}<br><font style="font-size:9px;color:#666666">{caption}</font>'


def sanitize_attribute_name(key: str) -> str | None:
    """Turn a property key into a usable XML attribute name, or None to drop it."""
    name = _WHITESPACE_RE.sub("_", key.strip())
    name = _INVALID_NAME_CHAR_RE.sub("_", name)
    if not name:
        return None
    if not (name[0].isalpha() or name[0] == "_"):
        name = f"_{name}"
    if name.lower().startswith("xml") or name in RESERVED_ATTRIBUTES:
        return None
    return name
