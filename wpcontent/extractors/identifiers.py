"""Slug and name-list helpers."""

from __future__ import annotations

from collections.abc import Iterable


def slug_from_url(url: str | None) -> str | None:
    """Return the last non-empty path segment of *url*.

    Example:
        https://michigandaily.com/news/my-post/ → my-post
    """
    if not url:
        return None
    parts = [part for part in url.strip().split("/") if part]
    return parts[-1] if parts else None


def join_names(names: Iterable[str]) -> str:
    """Render *names* as ``"A, B and C"``.

    Duplicates are dropped and the result is sorted, so the output does not
    depend on input order.
    """
    unique = sorted(set(names))
    if not unique:
        return ""
    if len(unique) == 1:
        return unique[0]
    return f"{', '.join(unique[:-1])} and {unique[-1]}"
