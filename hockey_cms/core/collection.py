"""
Generic CRUD over one content table.

Every content kind (trivia sub-types, stats, greetings, motivational quotes,
wisdom) is a flat table with the same publication lifecycle, so one service
parameterised by ``CollectionConfig`` serves all of them. ``build_admin_router``
and ``build_public_router`` expose the service with the usual CMS and public
endpoints.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel
from supabase import Client

from hockey_cms.core.dependencies import require_editor
from hockey_cms.core.responses import PUBLIC_CORS_HEADERS, database_error, envelope
from hockey_cms.core.status import (
    PublicationStatus,
    apply_status_filter,
    count_by_status,
    lifecycle_updates,
    utc_now_iso,
)
from hockey_cms.database.supabase_client import get_supabase

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def ilike_any(columns: Iterable[str], search: str) -> str:
    """
    PostgREST ``or`` expression matching ``search`` as a substring of any column.

    The pattern is double-quoted so commas and parentheses in user input stay
    part of the value instead of splitting the expression.
    """
    escaped = search.replace("\\", "\\\\").replace('"', '\\"')
    return ",".join(f'{col}.ilike."%{escaped}%"' for col in columns)


@dataclass(frozen=True)
class CollectionConfig:
    table: str
    label: str  # singular, human readable: "greeting"
    search_columns: Tuple[str, ...]
    public_columns: str = "*"
    filter_columns: Tuple[str, ...] = ("theme", "category")


class CollectionService:
    def __init__(self, supabase: Client, config: CollectionConfig):
        self.supabase = supabase
        self.config = config

    @property
    def table(self):
        return self.supabase.table(self.config.table)

    def list_items(
        self,
        status: Optional[str] = None,
        filters: Optional[Dict[str, Optional[str]]] = None,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List rows newest first with exact total count"""
        limit = min(limit, MAX_PAGE_SIZE)
        try:
            query = self.table.select("*", count="exact")
            query = apply_status_filter(query, status)
            for column, value in (filters or {}).items():
                if value:
                    query = query.eq(column, value)
            if search:
                query = query.or_(ilike_any(self.config.search_columns, search))
            result = query.order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or [], result.count or 0
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing {self.config.table}: {e}")
            raise database_error(e)

    def get_item(self, item_id: int) -> Dict[str, Any]:
        try:
            result = self.table.select("*").eq("id", item_id).maybe_single().execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail=f"{self.config.label.capitalize()} not found")
            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def create_item(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row; status defaults to draft"""
        record = dict(payload)
        record.setdefault("status", PublicationStatus.DRAFT.value)
        record.update(lifecycle_updates(record["status"], record))
        try:
            result = self.table.insert(record).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=f"Failed to create {self.config.label}")
            logger.info(f"Created {self.config.table} row {result.data[0].get('id')}")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating {self.config.label}: {e}")
            raise database_error(e)

    def update_item(self, item_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Update provided fields; a status change goes through the lifecycle rules"""
        existing = self.get_item(item_id)
        update_data = dict(payload)
        new_status = update_data.pop("status", None)
        update_data.update(lifecycle_updates(new_status, existing))
        update_data["updated_at"] = utc_now_iso()
        return self._write_update(item_id, update_data)

    def change_status(self, item_id: int, new_status: str) -> Dict[str, Any]:
        existing = self.get_item(item_id)
        update_data = lifecycle_updates(new_status, existing)
        update_data["updated_at"] = utc_now_iso()
        return self._write_update(item_id, update_data)

    def _write_update(self, item_id: int, update_data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.table.update(update_data).eq("id", item_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=f"{self.config.label.capitalize()} not found")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating {self.config.label} {item_id}: {e}")
            raise database_error(e)

    def delete_item(self, item_id: int) -> bool:
        try:
            result = self.table.delete().eq("id", item_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=f"{self.config.label.capitalize()} not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise database_error(e)

    def status_counts(self) -> Dict[str, int]:
        try:
            result = self.table.select("status").execute()
            return count_by_status(result.data or [])
        except Exception as e:
            raise database_error(e)

    def insert_many(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Bulk insert used when saving generated content"""
        try:
            result = self.table.insert(records).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error bulk inserting into {self.config.table}: {e}")
            raise database_error(e)

    # Public (published only)

    def list_published(
        self,
        filters: Optional[Dict[str, Optional[str]]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        limit = min(limit, MAX_PAGE_SIZE)
        try:
            query = self.table.select(self.config.public_columns, count="exact")\
                .eq("status", PublicationStatus.PUBLISHED.value)
            for column, value in (filters or {}).items():
                if value:
                    query = query.eq(column, value)
            result = query.order("published_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or [], result.count or 0
        except Exception as e:
            raise database_error(e)

    def latest_published(self, limit: int = 10) -> List[Dict[str, Any]]:
        rows, _ = self.list_published(limit=limit)
        if not rows:
            raise HTTPException(status_code=404, detail=f"No published {self.config.label} entries found")
        return rows

    def random_published(self) -> Dict[str, Any]:
        try:
            result = self.table.select(self.config.public_columns)\
                .eq("status", PublicationStatus.PUBLISHED.value)\
                .order("id")\
                .execute()
        except Exception as e:
            raise database_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail=f"No published {self.config.label} entries found")
        return random.choice(result.data)


def service_dependency(config: CollectionConfig) -> Callable[..., CollectionService]:
    def get_service(supabase: Client = Depends(get_supabase)) -> CollectionService:
        return CollectionService(supabase, config)
    return get_service


class StatusChange(BaseModel):
    status: PublicationStatus


def build_admin_router(
    prefix: str,
    config: CollectionConfig,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
) -> APIRouter:
    """CMS endpoints: list, stats, get, create, update, status change, delete"""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    get_service = service_dependency(config)
    filter_columns = config.filter_columns

    @router.get("")
    async def list_items(
        status: Optional[str] = None,
        theme: Optional[str] = None,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
        offset: int = Query(0, ge=0),
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        filters = {"theme": theme, "category": category, "difficulty": difficulty}
        filters = {k: v for k, v in filters.items() if k in filter_columns}
        rows, count = service.list_items(status=status, filters=filters, search=search, limit=limit, offset=offset)
        return envelope(rows, count=count)

    @router.get("/stats")
    async def status_stats(
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        """Counts by publication status"""
        return envelope(service.status_counts())

    @router.get("/{item_id}")
    async def get_item(
        item_id: int,
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        return envelope(service.get_item(item_id))

    @router.post("", status_code=201)
    async def create_item(
        payload: create_schema,
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        return envelope(service.create_item(payload.model_dump(mode="json", exclude_none=True)))

    @router.put("/{item_id}")
    async def update_item(
        item_id: int,
        payload: update_schema,
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        return envelope(service.update_item(item_id, payload.model_dump(mode="json", exclude_unset=True)))

    @router.patch("/{item_id}")
    async def change_status(
        item_id: int,
        payload: StatusChange,
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        """Status transition (draft/published/archived) with lifecycle timestamps"""
        return envelope(service.change_status(item_id, payload.status.value))

    @router.delete("/{item_id}")
    async def delete_item(
        item_id: int,
        user: Optional[Dict] = Depends(require_editor),
        service: CollectionService = Depends(get_service),
    ):
        service.delete_item(item_id)
        return envelope(message=f"{config.label.capitalize()} deleted successfully")

    return router


def public_cors_headers(response: Response) -> None:
    """Public endpoints are embedded by third-party sites; error responses get the same headers in core.responses"""
    response.headers.update(PUBLIC_CORS_HEADERS)


def build_public_router(prefix: str, config: CollectionConfig) -> APIRouter:
    """Read-only endpoints over published rows; no authentication"""
    router = APIRouter(
        prefix=f"/public{prefix}",
        tags=["public"],
        dependencies=[Depends(public_cors_headers)],
    )
    get_service = service_dependency(config)
    filter_columns = config.filter_columns

    @router.get("")
    async def list_published(
        theme: Optional[str] = None,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
        offset: int = Query(0, ge=0),
        service: CollectionService = Depends(get_service),
    ):
        filters = {"theme": theme, "category": category, "difficulty": difficulty}
        filters = {k: v for k, v in filters.items() if k in filter_columns}
        rows, count = service.list_published(filters=filters, limit=limit, offset=offset)
        return envelope(rows, count=count)

    @router.get("/random")
    async def random_published(service: CollectionService = Depends(get_service)):
        return envelope(service.random_published())

    @router.get("/latest")
    async def latest_published(
        limit: int = Query(10, ge=1),
        service: CollectionService = Depends(get_service),
    ):
        rows = service.latest_published(limit=limit)
        return envelope(rows, count=len(rows))

    return router
