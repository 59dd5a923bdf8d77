from fastapi import HTTPException
from pydantic import ValidationError
from supabase import Client
from hockey_cms.core.collection import CollectionConfig, CollectionService
from hockey_cms.core.content_types import ContentType, badge_key, is_trivia, normalize_content_type
from hockey_cms.core.status import PublicationStatus
from hockey_cms.modules.collections.schemas import GreetingCreate, MotivationalCreate, StatCreate
from hockey_cms.modules.collections.service import GREETINGS, MOTIVATIONAL, STATS, WISDOM
from hockey_cms.modules.content_save.schemas import GeneratedWisdom
from hockey_cms.modules.generation.parsing import MARKDOWN_PARSERS
from hockey_cms.modules.trivia.schemas import MultipleChoiceCreate, TrueFalseCreate, WhoAmICreate
from hockey_cms.modules.trivia.service import TRIVIA_CONFIGS
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

TRIVIA_SCHEMAS = {
    ContentType.MULTIPLE_CHOICE: MultipleChoiceCreate,
    ContentType.TRUE_FALSE: TrueFalseCreate,
    ContentType.WHO_AM_I: WhoAmICreate,
}

COLLECTION_TARGETS: Dict[ContentType, CollectionConfig] = {
    ContentType.STATS: STATS,
    ContentType.MOTIVATIONAL: MOTIVATIONAL,
    ContentType.GREETINGS: GREETINGS,
    ContentType.WISDOM: WISDOM,
    ContentType.PENALTY_BOX_PHILOSOPHER: WISDOM,
}

UNSUPPORTED_COLLECTION = (
    "Unsupported content type: {}. Expected: statistics, motivational, greetings, "
    "wisdom, or penalty-box-philosopher"
)


def _difficulty(value: Any) -> Optional[str]:
    if not value:
        return None
    text = str(value).strip().capitalize()
    return text if text in ("Easy", "Medium", "Hard") else None


def _optional_text(value: Any) -> Optional[str]:
    # Models sometimes return numbers for stat values
    if value is None:
        return None
    return str(value).strip() or None


def _year(value: Any) -> Optional[int]:
    text = str(value or "").strip()
    return int(text) if text.isdigit() else None


def _map_stats(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "stat_text": item.get("content_text"),
        "stat_value": _optional_text(item.get("stat_value")),
        "stat_category": _optional_text(item.get("stat_category")),
        "year": _year(item.get("year")),
        "theme": item.get("theme") or None,
        "category": item.get("category") or None,
        "attribution": item.get("attribution") or None,
    }


def _map_motivational(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "quote": item.get("content_text"),
        "context": item.get("context") or None,
        "theme": item.get("theme") or None,
        "category": item.get("category") or None,
        "attribution": item.get("attribution") or None,
    }


def _map_greeting(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "greeting_text": item.get("content_text"),
        "attribution": item.get("attribution") or None,
    }


def _map_wisdom(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "title": item.get("content_title") or "Untitled",
        "musing": item.get("musings") or item.get("content_text"),
        "from_the_box": item.get("from_the_box") or "",
        "theme": item.get("theme") or None,
        "category": item.get("category") or None,
        "attribution": item.get("attribution") or "Penalty Box Philosopher",
    }


FIELD_MAPPERS = {
    ContentType.STATS: _map_stats,
    ContentType.MOTIVATIONAL: _map_motivational,
    ContentType.GREETINGS: _map_greeting,
    ContentType.WISDOM: _map_wisdom,
    ContentType.PENALTY_BOX_PHILOSOPHER: _map_wisdom,
}

COLLECTION_SCHEMAS = {
    ContentType.STATS: StatCreate,
    ContentType.MOTIVATIONAL: MotivationalCreate,
    ContentType.GREETINGS: GreetingCreate,
    ContentType.WISDOM: GeneratedWisdom,
    ContentType.PENALTY_BOX_PHILOSOPHER: GeneratedWisdom,
}


class ContentSaveService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _draft_fields(self, source_content_id: Optional[int], created_by: Optional[str]) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "status": PublicationStatus.DRAFT.value,
            "source_content_id": source_content_id,
        }
        if created_by:
            fields["created_by"] = created_by
        return fields

    def track_usage(self, source_content_id: Optional[int], content_type: ContentType) -> None:
        """Record on the source row that it produced this content type; never fails the save"""
        if not source_content_id:
            return
        try:
            self.supabase.rpc(
                "append_to_used_for",
                {"target_id": source_content_id, "usage_type": badge_key(content_type)}
            ).execute()
        except Exception as e:
            logger.warning(
                f"Content saved, but failed to track usage for source ID {source_content_id}: {e}"
            )

    def _group_by_type(self, items: List[Dict[str, Any]], key: str, fallback: Optional[str]) -> Dict[ContentType, List[Dict[str, Any]]]:
        grouped: Dict[ContentType, List[Dict[str, Any]]] = {}
        for item in items:
            raw = item.get(key) or fallback
            try:
                content_type = normalize_content_type(raw)
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Unsupported content type: {raw}")
            grouped.setdefault(content_type, []).append(item)
        return grouped

    def _validated(self, content_type: ContentType, schema, candidate: Dict[str, Any]) -> Dict[str, Any]:
        try:
            validated = schema.model_validate(candidate)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ()))
            raise HTTPException(
                status_code=400,
                detail=f"Invalid {content_type.value} item: {field}: {first.get('msg')}"
            )
        return validated.model_dump(mode="json", exclude_none=True)

    def _trivia_record(self, content_type: ContentType, item: Dict[str, Any]) -> Dict[str, Any]:
        candidate = dict(item)
        candidate["question_text"] = item.get("question_text") or item.get("question") or ""
        candidate["difficulty"] = _difficulty(item.get("difficulty"))
        candidate["theme"] = item.get("theme") or None
        candidate["explanation"] = item.get("explanation") or None
        return self._validated(content_type, TRIVIA_SCHEMAS[content_type], candidate)

    def _collection_record(self, content_type: ContentType, item: Dict[str, Any]) -> Dict[str, Any]:
        return self._validated(content_type, COLLECTION_SCHEMAS[content_type], FIELD_MAPPERS[content_type](item))

    def save_trivia(
        self,
        items: List[Dict[str, Any]],
        source_content_id: Optional[int] = None,
        created_by: Optional[str] = None,
        question_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Insert trivia items into the table for their question_type"""
        if not items:
            raise HTTPException(status_code=400, detail="No items to save")
        grouped = self._group_by_type(items, "question_type", question_type)
        for content_type in grouped:
            if not is_trivia(content_type):
                raise HTTPException(status_code=400, detail=f"Not a trivia question type: {content_type.value}")

        # Validate everything before the first insert
        batches = {}
        for content_type, group in grouped.items():
            records = []
            for item in group:
                record = self._trivia_record(content_type, item)
                record.update(self._draft_fields(source_content_id, created_by))
                records.append(record)
            batches[content_type] = records

        saved: List[Dict[str, Any]] = []
        tables: List[str] = []
        for content_type, records in batches.items():
            service = CollectionService(self.supabase, TRIVIA_CONFIGS[content_type.value])
            saved.extend(service.insert_many(records))
            tables.append(service.config.table)
            logger.info(f"Saved {len(records)} {content_type.value} question(s) to {service.config.table}")
            self.track_usage(source_content_id, content_type)
        return {"data": saved, "count": len(saved), "tables": tables}

    def save_trivia_markdown(
        self,
        question_type: str,
        content: str,
        source_content_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        try:
            content_type = normalize_content_type(question_type)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unsupported question type: {question_type}")
        if content_type not in MARKDOWN_PARSERS:
            raise HTTPException(status_code=400, detail=f"Not a trivia question type: {question_type}")
        if not content or not content.strip():
            raise HTTPException(status_code=400, detail="Content is required")
        items = MARKDOWN_PARSERS[content_type](content)
        if not items:
            raise HTTPException(status_code=400, detail="No valid questions could be parsed from the content")
        return self.save_trivia(items, source_content_id, created_by)

    def save_collection_items(
        self,
        items: List[Dict[str, Any]],
        source_content_id: Optional[int] = None,
        created_by: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Insert stats, motivational, greetings and wisdom items with per-type field mapping"""
        if not items:
            raise HTTPException(status_code=400, detail="No items to save")
        grouped: Dict[ContentType, List[Dict[str, Any]]] = {}
        for item in items:
            raw = item.get("content_type") or content_type
            try:
                kind = normalize_content_type(raw)
            except ValueError:
                kind = None
            if kind not in COLLECTION_TARGETS:
                raise HTTPException(status_code=400, detail=UNSUPPORTED_COLLECTION.format(raw))
            grouped.setdefault(kind, []).append(item)

        # Validate everything before the first insert
        batches = {}
        for kind, group in grouped.items():
            records = []
            for item in group:
                record = self._collection_record(kind, item)
                record.update(self._draft_fields(source_content_id, created_by))
                records.append(record)
            batches[kind] = records

        saved: List[Dict[str, Any]] = []
        tables: List[str] = []
        for kind, records in batches.items():
            service = CollectionService(self.supabase, COLLECTION_TARGETS[kind])
            saved.extend(service.insert_many(records))
            if service.config.table not in tables:
                tables.append(service.config.table)
            logger.info(f"Saved {len(records)} {kind.value} item(s) to {service.config.table}")
            self.track_usage(source_content_id, kind)
        return {"data": saved, "count": len(saved), "tables": tables}

    def save_generated(
        self,
        content_type: ContentType,
        items: List[Dict[str, Any]],
        source_content_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Entry point for the job processor: route by kind"""
        if is_trivia(content_type):
            return self.save_trivia(items, source_content_id, created_by, question_type=content_type.value)
        return self.save_collection_items(items, source_content_id, created_by, content_type=content_type.value)
