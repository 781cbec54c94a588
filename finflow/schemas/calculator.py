"""Pydantic models for the calculator endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from .intent import CamelModel


class InputFieldSchema(CamelModel):
    key: str
    label: str
    default: float
    min: float
    max: float
    step: float
    prefill_sources: list[str] = Field(default_factory=list)


class CalculatorSummary(CamelModel):
    slug: str
    name: str
    short_name: str
    description: str
    category: str
    available: bool


class CalculatorDetail(CalculatorSummary):
    fields: list[InputFieldSchema] = Field(default_factory=list)


class ComputeRequest(BaseModel):
    inputs: dict[str, float] = Field(
        default_factory=dict,
        description="Calculator inputs keyed by input name; missing inputs use defaults.",
    )


class ComputeResponse(CamelModel):
    calculator_id: str
    inputs: dict[str, float]
    reported: dict[str, float]
    result: dict[str, Any]
    name: Optional[str] = None


__all__ = [
    "CalculatorDetail",
    "CalculatorSummary",
    "ComputeRequest",
    "ComputeResponse",
    "InputFieldSchema",
]
