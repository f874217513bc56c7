"""Mapping between host path segments and remote entry names."""

from __future__ import annotations

# Remote names may contain "/", which is the only structural character of a
# host path. It is swapped for FULLWIDTH SOLIDUS in path segments.
SLASH_REPLACEMENT: str = "／"


def encode(name: str) -> str:
    """Turn a remote entry name into a path segment."""
    return name.replace("/", SLASH_REPLACEMENT)


def decode(segment: str) -> str:
    """Turn a path segment back into the remote entry name."""
    return segment.replace(SLASH_REPLACEMENT, "/")


def clean_path(path: str) -> str:
    return path.strip("/")


def split_path(path: str) -> tuple[str, str]:
    """
    Split a host path into (parent, basename).

    The parent of a top-level entry is "" (the root).
    """
    path = clean_path(path)
    parent, _, base = path.rpartition("/")
    return parent, base


def join_path(parent: str, segment: str) -> str:
    parent = clean_path(parent)
    segment = clean_path(segment)
    if not parent:
        return segment
    if not segment:
        return parent
    return f"{parent}/{segment}"
