import logging
from google import genai
from hockey_cms.config import settings
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper around the google-genai client; one prompt in, free text out."""

    def __init__(self, api_key: Optional[str], model: str):
        self.model = model
        self._client = genai.Client(api_key=api_key) if api_key else None

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def generate(self, prompt: str) -> str:
        response = self._client.models.generate_content(model=self.model, contents=prompt)
        return (response.text or "").strip()

    def list_models(self) -> List[Dict[str, Any]]:
        models = []
        for model in self._client.models.list():
            models.append({
                "name": model.name,
                "displayName": getattr(model, "display_name", None),
                "supportedActions": getattr(model, "supported_actions", None) or [],
            })
        return models


_gemini_client: Optional[GeminiClient] = None


def get_gemini_client() -> GeminiClient:
    global _gemini_client
    if _gemini_client is None:
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set. Gemini API will not be available.")
        _gemini_client = GeminiClient(settings.gemini_api_key, settings.gemini_model)
    return _gemini_client
