import logging
import time
from fastapi import HTTPException
from hockey_cms.core.content_types import ContentType, is_trivia
from hockey_cms.modules.generation.gemini_client import GeminiClient
from hockey_cms.modules.generation.parsing import (
    FORMAT_INSTRUCTIONS,
    extract_json_object,
    format_items_for_display,
    format_trivia_for_display,
    strip_markdown,
)
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

GEMINI_UNAVAILABLE = "Gemini API is not available - API key not configured"


def build_prompt(custom_prompt: str, source_content: str) -> str:
    return f"{custom_prompt}\n\nSource Content:\n{source_content}"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return strip_markdown(str(value))


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "t", "yes", "1")


def normalize_item(content_type: ContentType, item: Dict[str, Any]) -> Dict[str, Any]:
    """Shape one generated item into what the save endpoints expect"""
    if content_type == ContentType.MULTIPLE_CHOICE:
        return {
            "question_type": content_type.value,
            "question_text": _as_text(item.get("question_text") or item.get("question")),
            "correct_answer": _as_text(item.get("correct_answer")),
            "wrong_answers": [_as_text(a) for a in item.get("wrong_answers") or []],
            "explanation": item.get("explanation") or "",
            "theme": item.get("theme") or "",
            "difficulty": item.get("difficulty"),
        }
    if content_type == ContentType.TRUE_FALSE:
        answer = item.get("is_true", item.get("correct_answer", item.get("answer")))
        return {
            "question_type": content_type.value,
            "question_text": _as_text(item.get("question_text") or item.get("question")),
            "is_true": _as_bool(answer),
            "explanation": item.get("explanation") or "",
            "theme": item.get("theme") or "",
            "difficulty": item.get("difficulty"),
        }
    if content_type == ContentType.WHO_AM_I:
        return {
            "question_type": content_type.value,
            "question_text": _as_text(item.get("question_text") or item.get("question")),
            "correct_answer": _as_text(item.get("correct_answer") or item.get("answer")),
            "explanation": item.get("explanation") or "",
            "theme": item.get("theme") or "",
            "difficulty": item.get("difficulty"),
        }
    normalized = dict(item)
    if "content_text" in normalized:
        normalized["content_text"] = _as_text(normalized["content_text"])
    normalized["content_type"] = content_type.value
    return normalized


class GenerationService:
    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    def _require_configured(self) -> None:
        if not self.gemini.is_configured:
            raise HTTPException(status_code=503, detail=GEMINI_UNAVAILABLE)

    def _call_model(self, prompt: str) -> str:
        self._require_configured()
        try:
            return self.gemini.generate(prompt)
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise HTTPException(status_code=500, detail=f"An error occurred during content generation: {e}")

    def generate_items(self, content_type: ContentType, source_content: str, custom_prompt: str) -> List[Dict[str, Any]]:
        """Generate structured items of one content type from a source text"""
        if not source_content or not source_content.strip():
            raise HTTPException(status_code=400, detail="Source content is required")
        if not custom_prompt or not custom_prompt.strip():
            raise HTTPException(
                status_code=400,
                detail="AI Prompt is required. Please load a prompt from the Prompts Library."
            )
        text = self._call_model(build_prompt(custom_prompt, source_content))
        if not text:
            raise HTTPException(status_code=500, detail="Gemini returned an empty response.")
        parsed = extract_json_object(text)
        if parsed is None:
            raise HTTPException(status_code=500, detail="The AI returned an invalid format. Please try again.")
        items = parsed.get("items")
        if not isinstance(items, list):
            raise HTTPException(status_code=500, detail='The AI response is missing the required "items" array.')
        normalized = [normalize_item(content_type, item) for item in items if isinstance(item, dict)]
        logger.info(f"Generated {len(normalized)} {content_type.value} item(s)")
        return normalized

    def generate_for_review(self, content_type: ContentType, source_content: str, custom_prompt: str) -> Dict[str, Any]:
        items = self.generate_items(content_type, source_content, custom_prompt)
        if is_trivia(content_type):
            display = format_trivia_for_display(content_type, items)
        else:
            display = format_items_for_display(items)
        return {
            "generatedContentForDisplay": display,
            "structuredDataForSaving": items,
        }

    def generate_readable_trivia(
        self,
        source_content: str,
        custom_prompt: str,
        question_type: ContentType = ContentType.MULTIPLE_CHOICE,
    ) -> Dict[str, Any]:
        """Markdown trivia; the caller's prompt plus the format block the markdown parsers rely on"""
        if not source_content or not source_content.strip():
            raise HTTPException(status_code=400, detail="Source content is required")
        if not custom_prompt or not custom_prompt.strip():
            raise HTTPException(status_code=400, detail="Custom prompt is required")
        started = time.perf_counter()
        format_instructions = FORMAT_INSTRUCTIONS.get(question_type, "")
        prompt = f"{custom_prompt}\n\nSOURCE CONTENT:\n{source_content}\n\n{format_instructions}"
        content = self._call_model(prompt)
        return {
            "content": content,
            "questionType": question_type.value,
            "processingTime": round((time.perf_counter() - started) * 1000, 1),
        }

    def test_connection(self) -> Dict[str, Any]:
        self._require_configured()
        text = self._call_model('Say "Hello, Gemini API is working!" and nothing else.')
        if "working" not in text.lower():
            raise HTTPException(status_code=500, detail="Unexpected response from Gemini API")
        return {"model": self.gemini.model, "response": text}

    def list_models(self) -> List[Dict[str, Any]]:
        self._require_configured()
        try:
            return self.gemini.list_models()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Error listing models: {e}")
