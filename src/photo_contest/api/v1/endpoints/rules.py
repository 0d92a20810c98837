# src/photo_contest/api/v1/endpoints/rules.py
"""Rules page endpoints for the photo contest API."""

from __future__ import annotations

from fastapi import APIRouter, status

from photo_contest.schemas.auth import SuccessResponse
from photo_contest.schemas.rule import RuleCreate, RuleResponse, RulesMarkdown, RuleUpdate
from photo_contest.services import rules as rule_service

from ..dependencies import AdminDep, SessionDep

router = APIRouter(tags=["rules"])


@router.get("/rules", response_model=list[RuleResponse])
async def list_rules(db: SessionDep) -> list[RuleResponse]:
    """Return rules in display order."""
    return [RuleResponse.model_validate(rule) for rule in rule_service.list_rules(db)]


@router.get("/rules/markdown", response_model=RulesMarkdown)
async def get_rules_markdown(db: SessionDep) -> RulesMarkdown:
    return RulesMarkdown(content=rule_service.get_rules_markdown(db))


# Registered before /admin/rules/{rule_id} so "markdown" is not taken for an id.
@router.put("/admin/rules/markdown", response_model=RulesMarkdown)
async def set_rules_markdown(payload: RulesMarkdown, db: SessionDep, _: AdminDep) -> RulesMarkdown:
    return RulesMarkdown(content=rule_service.set_rules_markdown(db, payload.content))


@router.post("/admin/rules", response_model=RuleResponse, status_code=status.HTTP_201_CREATED)
async def create_rule(payload: RuleCreate, db: SessionDep, _: AdminDep) -> RuleResponse:
    return RuleResponse.model_validate(rule_service.create_rule(db, payload))


@router.put("/admin/rules/{rule_id}", response_model=RuleResponse)
async def update_rule(rule_id: int, payload: RuleUpdate, db: SessionDep, _: AdminDep) -> RuleResponse:
    return RuleResponse.model_validate(rule_service.update_rule(db, rule_id, payload))


@router.delete("/admin/rules/{rule_id}", response_model=SuccessResponse)
async def delete_rule(rule_id: int, db: SessionDep, _: AdminDep) -> SuccessResponse:
    rule_service.delete_rule(db, rule_id)
    return SuccessResponse()
