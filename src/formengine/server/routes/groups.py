"""Component-group loading route."""

from __future__ import annotations

from collections import Counter

from fastapi import APIRouter, HTTPException

from ...config import EngineConfig
from ...loader import GroupSource, load_component_groups
from ...scope.mois import MoisScopeBuilder
from ...ui.renderer import json_safe
from ..schemas import GroupErrorModel, GroupsLoadRequest, GroupsLoadResponse


def build_groups_router(config: EngineConfig) -> APIRouter:
    router = APIRouter()

    @router.post("/api/groups/load", response_model=GroupsLoadResponse)
    def api_groups_load(payload: GroupsLoadRequest) -> GroupsLoadResponse:
        duplicates = sorted(name for name, count in Counter(group.name for group in payload.groups).items() if count > 1)
        if duplicates:
            raise HTTPException(status_code=400, detail=f"Duplicate group names: {', '.join(duplicates)}")
        sources = [GroupSource(name=group.name, code=group.code, identity=group.identity) for group in payload.groups]
        result = load_component_groups(
            sources,
            MoisScopeBuilder(),
            enable_cross_references=payload.enable_cross_references,
            passes=payload.passes,
            config=config,
        )
        return GroupsLoadResponse(
            groups={name: sorted(exports) for name, exports in result.groups.items()},
            registry=sorted(result.components),
            errors=[
                GroupErrorModel(group=error.group, message=error.message, code=error.code, line=error.line, column=error.column)
                for error in result.errors
            ],
            metadata=json_safe(result.metadata),
        )

    return router


__all__ = ["build_groups_router"]
