"""Request descriptor schema (Pydantic model).

The descriptor is the contract between the reqline parser and the upstream executor.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.reqline.keywords import HttpMethod


class RequestDescriptor(BaseModel):
    """A fully validated request, ready for execution."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    method: HttpMethod
    url: str = Field(min_length=1)
    headers: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    body: dict[str, Any] = Field(default_factory=dict)
    full_url: str = Field(min_length=1)
