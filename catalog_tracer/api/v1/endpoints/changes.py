"""Change tracking endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from catalog_tracer.core.security import require_admin
from catalog_tracer.db.session import get_db
from catalog_tracer.models.actor import User
from catalog_tracer.schemas.change import (
    ChangeEventResponse,
    ChangeRecordCreate,
    ChangeRecordRead,
    EnrichedChangeRecord,
)
from catalog_tracer.services.change_service import (
    ChangeScope,
    TableScope,
    get_changes,
    get_recent_changes,
    get_record_history,
    record_change,
)
from catalog_tracer.services.errors import InvalidChangeError, StoreUnavailableError
from catalog_tracer.services.scope_resolver import ScopeAnchor

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _unavailable() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=[])


def _build_scope(anchors: dict[str, str | None], source_table: str | None, source_key: str | None) -> ChangeScope:
    if source_key and not source_table:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="source_key requires source_table")
    given = [(kind, key) for kind, key in anchors.items() if key]
    if source_table:
        given.append(("source_table", source_table))
    if not given:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A scope parameter is required")
    if len(given) > 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only one scope parameter is allowed")

    kind, key = given[0]
    if kind == "source_table":
        return TableScope(table=key, key=source_key or None)
    return ScopeAnchor.for_kind(kind, key)


@router.get("", response_model=list[EnrichedChangeRecord])
def list_changes(
    brand_id: str | None = None,
    category_id: str | None = None,
    subcategory_id: str | None = None,
    knowledge_id: str | None = None,
    kategori_sop_id: str | None = None,
    sop_id: str | None = None,
    quality_training_id: str | None = None,
    source_table: str | None = None,
    source_key: str | None = None,
    action: str | None = None,
    changed_by: str | None = None,
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Return enriched changes for an anchor entity and everything below it."""
    scope = _build_scope(
        {
            "brand": brand_id,
            "category": category_id,
            "subcategory": subcategory_id,
            "knowledge": knowledge_id,
            "kategori_sop": kategori_sop_id,
            "sop": sop_id,
            "quality_training": quality_training_id,
        },
        source_table,
        source_key,
    )
    try:
        return get_changes(db, scope, limit=limit, action_type=action, changed_by=changed_by)
    except StoreUnavailableError:
        logger.warning("[TRACER] Change store unavailable while listing changes for %s", scope)
        return _unavailable()


@router.post("", response_model=ChangeRecordRead, status_code=status.HTTP_201_CREATED)
def create_change(
    payload: ChangeRecordCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    try:
        record = record_change(db, payload, changed_by=current_user.id)
    except InvalidChangeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Change store unavailable") from exc
    return ChangeRecordRead.model_validate(record)


@router.get("/recent", response_model=list[EnrichedChangeRecord])
def recent_changes(
    limit: int = Query(default=50, ge=1),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    try:
        return get_recent_changes(db, limit=limit)
    except StoreUnavailableError:
        return _unavailable()


@router.get("/history/{source_table}/{source_key}", response_model=list[ChangeEventResponse])
def record_history(
    source_table: str,
    source_key: str,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    """Every change of one entity grouped into change events, oldest first."""
    try:
        return get_record_history(db, source_table, source_key)
    except StoreUnavailableError:
        return _unavailable()
