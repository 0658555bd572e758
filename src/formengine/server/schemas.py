"""Pydantic schemas used by the FastAPI preview server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..version import TREE_VERSION


class TransformRequest(BaseModel):
    code: str


class TransformResponse(BaseModel):
    shape: str
    wrapper: str
    body: str
    uses_stateful_bindings: bool = False
    references_form: bool = False
    references: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class RenderRequest(BaseModel):
    code: str
    source_data: Optional[Dict[str, Any]] = Field(default=None, description="Overrides the default patient/option-list data")
    identity: Optional[Dict[str, Any]] = None


class RenderResponse(BaseModel):
    html: str
    tree: Any = None
    tree_version: str = TREE_VERSION
    initial_data: Any = None
    form_data: Dict[str, Any] = Field(default_factory=dict)
    shape: Optional[str] = None
    error: Optional[str] = None
    references: List[str] = Field(default_factory=list)


class GroupPayload(BaseModel):
    name: str = Field(..., min_length=1)
    code: str
    identity: Optional[Dict[str, Any]] = None


class GroupsLoadRequest(BaseModel):
    groups: List[GroupPayload]
    enable_cross_references: Optional[bool] = None
    passes: Optional[int] = Field(default=None, ge=1, le=50)


class GroupErrorModel(BaseModel):
    group: str
    message: str
    code: str
    line: Optional[int] = None
    column: Optional[int] = None


class GroupsLoadResponse(BaseModel):
    groups: Dict[str, List[str]]
    registry: List[str]
    errors: List[GroupErrorModel] = Field(default_factory=list)
    metadata: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
