"""CRUD-style helpers for the contest rules page."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.orm import Session

from photo_contest.models import Rule
from photo_contest.schemas.rule import RuleCreate, RuleUpdate
from photo_contest.services.errors import NotFoundError
from photo_contest.services.settings_store import RULES_MARKDOWN, get_setting, set_setting

logger = logging.getLogger(__name__)

__all__ = [
    "list_rules",
    "create_rule",
    "update_rule",
    "delete_rule",
    "get_rules_markdown",
    "set_rules_markdown",
]


def list_rules(db: Session) -> Sequence[Rule]:
    """Return rules in display order."""
    return db.query(Rule).order_by(Rule.display_order, Rule.id).all()


def _get_rule(db: Session, rule_id: int) -> Rule:
    rule = db.get(Rule, rule_id)
    if rule is None:
        raise NotFoundError(f"Rule {rule_id} not found")
    return rule


def create_rule(db: Session, data: RuleCreate) -> Rule:
    rule = Rule(
        title=data.title,
        content=data.content,
        category_tag=data.category,
        importance=data.importance,
        display_order=data.display_order,
    )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule


def update_rule(db: Session, rule_id: int, data: RuleUpdate) -> Rule:
    """Apply partial updates to an existing rule."""
    rule = _get_rule(db, rule_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(rule, "category_tag" if key == "category" else key, value)
    db.commit()
    db.refresh(rule)
    return rule


def delete_rule(db: Session, rule_id: int) -> None:
    rule = _get_rule(db, rule_id)
    db.delete(rule)
    db.commit()
    logger.info("Deleted rule %s", rule_id)


def get_rules_markdown(db: Session) -> str:
    return get_setting(db, RULES_MARKDOWN) or ""


def set_rules_markdown(db: Session, content: str) -> str:
    set_setting(db, RULES_MARKDOWN, content)
    db.commit()
    return content
