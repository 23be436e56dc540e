"""Pydantic models describing the logbook JSON document.

The document is the single-file layout shared with exports:
``{"characters": [...], "artifacts": [...], "dropdownOptions": {...}}``.
Entities stay free-form mappings; only the envelope is typed.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _null_to_empty_list(value: object) -> object:
    return [] if value is None else value


def _null_to_empty_dict(value: object) -> object:
    return {} if value is None else value


class LogbookBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class LogbookDocument(LogbookBaseModel):
    characters: list[dict[str, Any]] = Field(default_factory=list)
    artifacts: list[dict[str, Any]] = Field(default_factory=list)
    dropdown_options: dict[str, Any] = Field(default_factory=dict, alias="dropdownOptions")

    _normalize_characters = field_validator("characters", mode="before")(_null_to_empty_list)
    _normalize_artifacts = field_validator("artifacts", mode="before")(_null_to_empty_list)
    _normalize_options = field_validator("dropdown_options", mode="before")(_null_to_empty_dict)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
