"""
Markdown files kept next to the application: prompt templates and topic lists.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple

from fastapi import HTTPException

logger = logging.getLogger(__name__)

TEMPLATE_CATEGORIES = ("trivia", "stats", "hugs", "motivational", "stories")

TOPIC_FILES = {
    "trivia_sets": "trivia-topics.md",
    "statistics": "statistics-topics.md",
    "lore": "lore-topics.md",
    "motivational": "motivational-topics.md",
    "greetings": "greetings-topics.md",
}


def sanitize_file_name(name: str) -> str:
    name = (name or "").lower()
    name = re.sub(r"[^a-z0-9\s-]", "", name)
    name = re.sub(r"\s+", "-", name)
    return re.sub(r"-+", "-", name).strip("-")


def split_front_matter(text: str) -> Tuple[Dict[str, str], str]:
    """Split a ``---`` delimited header of ``key: value`` lines from the body"""
    if not text.startswith("---"):
        return {}, text.strip()
    parts = text.split("---", 2)
    if len(parts) < 3:
        return {}, text.strip()
    meta = {}
    for line in parts[1].strip().splitlines():
        if ":" in line:
            key, value = line.split(":", 1)
            meta[key.strip()] = value.strip()
    return meta, parts[2].strip()


class PromptTemplateStore:
    def __init__(self, root: str):
        self.root = Path(root)

    def _category_dir(self, category: str) -> Path:
        if category not in TEMPLATE_CATEGORIES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid category. Must be one of: {', '.join(TEMPLATE_CATEGORIES)}"
            )
        return self.root / category

    def save_template(self, name: str, content: str, category: str) -> Dict[str, str]:
        directory = self._category_dir(category)
        file_stem = sanitize_file_name(name)
        if not file_stem:
            raise HTTPException(status_code=400, detail="Invalid prompt name")
        file_name = f"{file_stem}.md"
        path = directory / file_name
        if path.exists():
            raise HTTPException(
                status_code=409,
                detail=f'A prompt with name "{name}" already exists in {category}'
            )
        directory.mkdir(parents=True, exist_ok=True)
        created = datetime.now(timezone.utc).isoformat()
        path.write_text(
            f"---\nname: {name}\ncategory: {category}\ncreated: {created}\n---\n\n{content}\n",
            encoding="utf-8"
        )
        logger.info(f"Saved prompt template {path}")
        return {"fileName": file_name, "filePath": f"{self.root.name}/{category}/{file_name}"}

    def list_templates(self, category: str) -> List[Dict[str, Any]]:
        directory = self._category_dir(category)
        if not directory.is_dir():
            return []
        templates = []
        for path in sorted(directory.glob("*.md")):
            meta, body = split_front_matter(path.read_text(encoding="utf-8"))
            templates.append({
                "fileName": path.name,
                "name": meta.get("name") or path.stem,
                "category": meta.get("category") or category,
                "created": meta.get("created"),
                "content": body,
            })
        return templates


def parse_topics(content: str) -> List[Dict[str, str]]:
    """Each ``### Name`` heading starts a topic; the lines below it form the description"""
    topics = []
    sections = re.split(r"^### ", content, flags=re.MULTILINE)
    # Text before the first heading is a preamble
    for section in sections[1:]:
        lines = section.strip().split("\n")
        name = lines[0].strip()
        if name and len(lines) > 1:
            description = " ".join(line.strip() for line in lines[1:] if line.strip())
            topics.append({"name": name, "description": description})
    return topics


def load_topics(topics_dir: str, content_type: str) -> List[Dict[str, str]]:
    file_name = TOPIC_FILES.get(content_type)
    if not file_name:
        raise HTTPException(status_code=400, detail="Invalid content type")
    path = Path(topics_dir) / file_name
    if not path.exists():
        raise HTTPException(status_code=404, detail="Topics config file not found")
    return parse_topics(path.read_text(encoding="utf-8"))
