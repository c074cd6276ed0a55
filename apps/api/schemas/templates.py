from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from packages.nuntius.reminders.models import MessageTemplate


class TemplateCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nombre", min_length=1)
    message: str = Field(..., alias="mensaje", min_length=1)


class TemplateUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="nombre")
    message: Optional[str] = Field(default=None, alias="mensaje")


class TemplateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    owner_id: Optional[str] = Field(default=None, alias="ownerId")
    name: str = Field(alias="nombre")
    message: str = Field(alias="mensaje")
    created_at: Optional[str] = Field(default=None, alias="fechaCreacion")

    @classmethod
    def from_template(cls, template: MessageTemplate) -> "TemplateResponse":
        return cls.model_validate(template.to_dict())
