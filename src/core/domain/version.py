"""Semantic version parsing and the patch-bump policy used for Studio deploys."""

from __future__ import annotations

from core.domain.models import SemanticVersion


def parse_version(value: str) -> SemanticVersion:
    """Parse `major.minor.patch` into a `SemanticVersion`.

    Every component must be a plain non-negative integer; anything else
    raises `ValueError`.
    """

    parts = value.split(".")
    if len(parts) != 3 or not all(part.isdigit() and part.isascii() for part in parts):
        raise ValueError(f"Invalid version label: {value!r}")
    major, minor, patch = (int(part) for part in parts)
    return SemanticVersion(major=major, minor=minor, patch=patch)


def next_version(current: SemanticVersion | tuple[int, int, int]) -> str:
    """Return the label of the next patch release. No carry into minor."""

    if isinstance(current, tuple):
        current = SemanticVersion(major=current[0], minor=current[1], patch=current[2])
    return str(current.model_copy(update={"patch": current.patch + 1}))
