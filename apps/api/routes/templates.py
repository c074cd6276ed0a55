from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from apps.api.deps import CurrentUser, current_user
from apps.api.schemas.templates import (
    TemplateCreateRequest,
    TemplateResponse,
    TemplateUpdateRequest,
)
from packages.nuntius.config import load_settings
from packages.nuntius.reminders.service import (
    PermissionDenied,
    TemplateNotFound,
    create_template,
    delete_template,
    list_templates,
    update_template,
)
from packages.nuntius.storage.base import TemplateStore
from packages.nuntius.storage.json_store import open_template_store


router = APIRouter(prefix="/api/recordatorios/plantillas", tags=["templates"])


def _store() -> TemplateStore:
    return open_template_store(load_settings().templates_path)


@router.get("", response_model=List[TemplateResponse])
def list_all(user: CurrentUser = Depends(current_user)) -> List[TemplateResponse]:
    templates = list_templates(_store(), owner_id=user.id, is_admin=user.is_admin)
    return [TemplateResponse.from_template(template) for template in templates]


@router.post("", response_model=TemplateResponse, status_code=201)
def create(
    payload: TemplateCreateRequest, user: CurrentUser = Depends(current_user)
) -> TemplateResponse:
    try:
        template = create_template(_store(), user.id, payload.name, payload.message)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return TemplateResponse.from_template(template)


@router.put("/{template_id}", response_model=TemplateResponse)
def update(
    template_id: str,
    payload: TemplateUpdateRequest,
    user: CurrentUser = Depends(current_user),
) -> TemplateResponse:
    try:
        template = update_template(
            _store(),
            template_id,
            name=payload.name,
            message=payload.message,
            owner_id=user.id,
            is_admin=user.is_admin,
        )
    except TemplateNotFound as exc:
        raise HTTPException(status_code=404, detail="Template not found") from exc
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail="Forbidden") from exc
    return TemplateResponse.from_template(template)


@router.delete("/{template_id}")
def delete(template_id: str, user: CurrentUser = Depends(current_user)) -> Dict[str, Any]:
    try:
        delete_template(_store(), template_id, owner_id=user.id, is_admin=user.is_admin)
    except TemplateNotFound as exc:
        raise HTTPException(status_code=404, detail="Template not found") from exc
    except PermissionDenied as exc:
        raise HTTPException(status_code=403, detail="Forbidden") from exc
    return {"status": "deleted", "id": template_id}
