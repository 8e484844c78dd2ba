from __future__ import annotations


class DiagramError(Exception):
    """Base error for diagram generation failures."""


class StructuralError(DiagramError):
    """The placed cell tree is not a tree: duplicate ids, self-parenting or cycles."""
