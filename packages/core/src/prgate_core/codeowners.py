"""CODEOWNERS parsing and reviewer selection.

Only individual owners are picked up: team entries (``@org/team``) and
e-mail owners can't be requested as individual reviewers through the
pulls API, so they are skipped.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_codeowners(text: str) -> list[str]:
    """Return the individual owner logins in ``text``, first-seen order, no duplicates."""
    owners: list[str] = []
    seen: set[str] = set()
    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        # First token is the path pattern; the rest are owners.
        for token in line.split()[1:]:
            if not token.startswith("@"):
                continue
            login = token[1:]
            if not login or "/" in login:
                continue
            key = login.lower()
            if key not in seen:
                seen.add(key)
                owners.append(login)
    return owners


def load_owners(path: str) -> list[str]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"CODEOWNERS file not found: {path}")
    owners = parse_codeowners(p.read_text(encoding="utf-8"))
    logger.debug("Loaded %d owner(s) from %s", len(owners), path)
    return owners


def select_reviewers(
    owners: Iterable[str],
    count: int,
    exclude: Iterable[str] = (),
    rng: random.Random | None = None,
) -> list[str]:
    """Pick up to ``count`` reviewers uniformly at random from ``owners``.

    Logins in ``exclude`` (typically the PR author) are never picked;
    comparison is case-insensitive like GitHub logins.
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}.")
    excluded = {login.lower() for login in exclude}
    candidates = [o for o in owners if o.lower() not in excluded]
    if not candidates:
        return []
    rng = rng or random.Random()
    return rng.sample(candidates, min(count, len(candidates)))
