"""Key-value contest configuration stored in the ``settings`` table."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from photo_contest.models import Setting

logger = logging.getLogger(__name__)

VOTING_OPEN = "voting_open"
SUBMISSIONS_OPEN = "submissions_open"
CURRENT_THEME = "current_theme"
RULES_MARKDOWN = "rules_markdown"

DEFAULTS: dict[str, Any] = {
    VOTING_OPEN: False,
    SUBMISSIONS_OPEN: True,
    CURRENT_THEME: None,
    RULES_MARKDOWN: "",
}


@dataclass(frozen=True)
class ContestConfig:
    """Snapshot of the contest switches, loaded once per request."""

    voting_open: bool = False
    submissions_open: bool = True
    current_theme: dict[str, Any] | None = None
    rules_markdown: str = ""


def _decode(raw: str | None, default: Any) -> Any:
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except ValueError:
        # Legacy rows stored bare strings such as 'true'.
        logger.warning("Setting value %r is not JSON; using it verbatim", raw)
        return raw


def get_setting(db: Session, key: str) -> Any:
    """Return a decoded setting value, falling back to its default."""
    row = db.get(Setting, key)
    return _decode(row.value if row else None, DEFAULTS.get(key))


def set_setting(db: Session, key: str, value: Any) -> None:
    """Stage a last-write-wins update of ``key``; the caller commits."""
    encoded = json.dumps(value)
    row = db.get(Setting, key)
    if row is None:
        db.add(Setting(key=key, value=encoded))
    else:
        row.value = encoded


def load_config(db: Session) -> ContestConfig:
    """Read every contest switch into an immutable record."""
    values = dict(DEFAULTS)
    for row in db.query(Setting).filter(Setting.key.in_(list(DEFAULTS))).all():
        values[row.key] = _decode(row.value, DEFAULTS[row.key])

    theme = values[CURRENT_THEME]
    return ContestConfig(
        voting_open=values[VOTING_OPEN] in (True, "true"),
        submissions_open=values[SUBMISSIONS_OPEN] in (True, "true"),
        current_theme=theme if isinstance(theme, dict) else None,
        rules_markdown=values[RULES_MARKDOWN] or "",
    )


def seed_defaults(db: Session) -> None:
    """Insert missing setting rows without overwriting existing ones."""
    existing = {key for (key,) in db.query(Setting.key).all()}
    for key, value in DEFAULTS.items():
        if key not in existing:
            db.add(Setting(key=key, value=json.dumps(value)))
    db.commit()
