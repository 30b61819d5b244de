"""
Framework Reference Models — schema of the per-risk framework JSON files.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FrameworkFactor(BaseModel):
    factor: str
    description: str = ""


class FrameworkExample(BaseModel):
    title: str
    description: str = ""


class FrameworkMitigation(BaseModel):
    id: str
    name: str
    description: str = ""
    url: str = ""


class FrameworkRisk(BaseModel):
    """Reference entry for one risk category."""

    id: str
    title: str
    description: str = ""
    contributing_factors: list[FrameworkFactor] = Field(default_factory=list)
    examples: list[FrameworkExample] = Field(default_factory=list)
    key_mitigations: list[FrameworkMitigation] = Field(default_factory=list)
    external_references: list[str] = Field(default_factory=list)
