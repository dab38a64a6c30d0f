"""Utility helpers shared across server modules."""

from __future__ import annotations

from pathlib import Path


def resolve_file_path(base_dir: str | Path, name: str) -> Path | None:
    """Resolve ``name`` under ``base_dir`` or return None for traversal attempts."""
    if not name or "\x00" in name:
        return None

    root = Path(base_dir).resolve()
    candidate = (root / name).resolve()

    try:
        relative = candidate.relative_to(root)
    except ValueError:
        return None

    if relative == Path("."):
        return None
    return candidate
