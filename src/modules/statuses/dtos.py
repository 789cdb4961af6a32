"""Order status DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.statuses.registry import is_valid_color


def _check_color(v: Optional[str]) -> Optional[str]:
    if v is not None and not is_valid_color(v):
        raise ValueError("Color must be a #RRGGBB hex value.")
    return v.lower() if v else v


class CreateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str
    sort_order: int
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Status name is required.")
        return v

    @field_validator("color")
    @classmethod
    def color_is_hex(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v)


class UpdateStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: Optional[str] = None
    sort_order: Optional[int] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Status name cannot be blank.")
        return v

    @field_validator("color")
    @classmethod
    def color_is_hex(cls, v: Optional[str]) -> Optional[str]:
        return _check_color(v)
