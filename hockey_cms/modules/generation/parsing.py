"""
Heuristics for turning Gemini free text into records.

Two response shapes are handled: a JSON object with an ``items`` array
(possibly wrapped in prose or a code fence), and readable Markdown trivia
blocks separated by ``---``.
"""

import json
import logging
import random
import re
from typing import Any, Dict, List, Optional

from hockey_cms.core.content_types import ContentType

logger = logging.getLogger(__name__)

FORMAT_INSTRUCTIONS = {
    ContentType.MULTIPLE_CHOICE: """CRITICAL OUTPUT FORMAT REQUIREMENT (for system parsing):
Format each question EXACTLY like this:

**Question [number]:** [The question text]

**Theme:** [Theme word or short phrase for word cloud]

A) [Option A]
B) [Option B]
C) [Option C]
D) [Option D]

**Correct Answer:** [A/B/C/D]

---""",
    ContentType.TRUE_FALSE: """CRITICAL OUTPUT FORMAT REQUIREMENT (for system parsing):
Format each question EXACTLY like this:

**Question [number]:** [The question text]

**Theme:** [Theme word or short phrase for word cloud]

**Answer:** True OR False

**Explanation:** [Brief explanation]

---""",
    ContentType.WHO_AM_I: """CRITICAL OUTPUT FORMAT REQUIREMENT (for system parsing):
Format each question EXACTLY like this:

**Question [number]:** [The question text]

**Theme:** [Theme word or short phrase for word cloud]

**Answer:** [The answer]

---""",
}

_QUESTION_RE = re.compile(r"^\*\*Question\s*\d*:\*\*\s*")
_OPTION_RE = re.compile(r"^([A-D])\)\s*(.+)$")
_DIFFICULTIES = {"easy": "Easy", "medium": "Medium", "hard": "Hard"}


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse the outermost {...} of a response; None when absent or malformed."""
    if not text:
        return None
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        logger.error("No JSON object found in the response.")
        return None
    try:
        parsed = json.loads(text[start:end + 1])
    except json.JSONDecodeError:
        logger.error(f"Failed to parse Gemini response as JSON: {text[:200]}")
        return None
    return parsed if isinstance(parsed, dict) else None


def strip_markdown(text: str) -> str:
    """Remove surrounding bold markers and quotes."""
    text = text.strip()
    text = re.sub(r"^\*\*+", "", text)
    text = re.sub(r"\*\*+$", "", text)
    text = re.sub(r"^[\"']", "", text)
    text = re.sub(r"[\"']$", "", text)
    return text.strip()


def _field(line: str, label: str) -> Optional[str]:
    prefix = f"**{label}:**"
    if line.startswith(prefix):
        return line[len(prefix):].strip()
    return None


def _split_blocks(content: str) -> List[List[str]]:
    blocks = []
    for block in content.split("---"):
        lines = [line.strip() for line in block.strip().split("\n") if line.strip()]
        if lines:
            blocks.append(lines)
    return blocks


def _common_fields(lines: List[str]) -> Dict[str, Any]:
    fields: Dict[str, Any] = {"question_text": "", "theme": None, "tags": None, "difficulty": None, "explanation": None}
    for line in lines:
        if _QUESTION_RE.match(line):
            fields["question_text"] = _QUESTION_RE.sub("", line).strip()
            continue
        theme = _field(line, "Theme")
        tags = _field(line, "Tags")
        difficulty = _field(line, "Difficulty")
        explanation = _field(line, "Explanation")
        if theme is not None:
            fields["theme"] = theme or None
        elif tags is not None:
            fields["tags"] = [t.strip() for t in tags.split(",") if t.strip()] or None
        elif difficulty is not None:
            fields["difficulty"] = _DIFFICULTIES.get(difficulty.lower())
        elif explanation is not None:
            fields["explanation"] = explanation or None
    return fields


def parse_multiple_choice_markdown(content: str) -> List[Dict[str, Any]]:
    """Blocks with four A)-D) options and a **Correct Answer:** letter."""
    questions = []
    for lines in _split_blocks(content):
        fields = _common_fields(lines)
        options: Dict[str, str] = {}
        correct_letter = ""
        for line in lines:
            match = _OPTION_RE.match(line)
            correct = _field(line, "Correct Answer")
            if match:
                options[match.group(1)] = match.group(2).strip()
            elif correct is not None:
                correct_letter = correct.upper()[:1]
        if not fields["question_text"] or len(options) != 4 or correct_letter not in options:
            continue
        wrong_answers = [text for letter, text in sorted(options.items()) if letter != correct_letter]
        questions.append({
            **fields,
            "question_type": ContentType.MULTIPLE_CHOICE.value,
            "correct_answer": options[correct_letter],
            "wrong_answers": wrong_answers,
        })
    return questions


def parse_true_false_markdown(content: str) -> List[Dict[str, Any]]:
    """Blocks with **Answer:** True/False."""
    questions = []
    for lines in _split_blocks(content):
        fields = _common_fields(lines)
        is_true = None
        for line in lines:
            value = _field(line, "Answer")
            if value is None:
                value = _field(line, "Correct Answer")
            if value is not None:
                answer = strip_markdown(value).lower()
                if answer.startswith("true"):
                    is_true = True
                elif answer.startswith("false"):
                    is_true = False
        if not fields["question_text"] or is_true is None:
            continue
        questions.append({
            **fields,
            "question_type": ContentType.TRUE_FALSE.value,
            "is_true": is_true,
        })
    return questions


def parse_who_am_i_markdown(content: str) -> List[Dict[str, Any]]:
    """Blocks with **Answer:** text, or **Correct Answer:** referencing an option letter."""
    questions = []
    for lines in _split_blocks(content):
        fields = _common_fields(lines)
        options: Dict[str, str] = {}
        answer = ""
        for line in lines:
            match = _OPTION_RE.match(line)
            if match:
                options[match.group(1)] = match.group(2).strip()
        for line in lines:
            direct = _field(line, "Answer")
            referenced = _field(line, "Correct Answer")
            if direct is not None:
                answer = direct
            elif referenced is not None:
                letter = referenced.upper()
                answer = options.get(letter, referenced) if re.fullmatch(r"[A-D]", letter) else referenced
        answer = strip_markdown(answer)
        if not fields["question_text"] or not answer:
            continue
        questions.append({
            **fields,
            "question_type": ContentType.WHO_AM_I.value,
            "correct_answer": answer,
        })
    return questions


MARKDOWN_PARSERS = {
    ContentType.MULTIPLE_CHOICE: parse_multiple_choice_markdown,
    ContentType.TRUE_FALSE: parse_true_false_markdown,
    ContentType.WHO_AM_I: parse_who_am_i_markdown,
}


# Display formatting for the CMS preview pane

def format_trivia_for_display(content_type: ContentType, items: List[Dict[str, Any]]) -> str:
    if not items:
        return "No questions generated."
    blocks = []
    for index, item in enumerate(items, start=1):
        lines = [f"**Question {index}:** {item.get('question_text', '')}"]
        if content_type == ContentType.MULTIPLE_CHOICE:
            options = [item.get("correct_answer", "")] + list(item.get("wrong_answers") or [])
            random.shuffle(options)
            lines.append("\n".join(f"{chr(65 + i)}) {opt}" for i, opt in enumerate(options)))
            lines.append(f"**Correct Answer:** {chr(65 + options.index(item.get('correct_answer', '')))}")
        elif content_type == ContentType.TRUE_FALSE:
            lines.append(f"**Answer:** {'True' if item.get('is_true') else 'False'}")
        else:
            lines.append(f"**Answer:** {item.get('correct_answer', '')}")
        if item.get("explanation"):
            lines.append(f"**Explanation:** {item['explanation']}")
        blocks.append("\n\n".join(lines))
    return "\n\n---\n\n".join(blocks)


def format_items_for_display(items: List[Dict[str, Any]]) -> str:
    if not items:
        return "No content generated."
    blocks = []
    for index, item in enumerate(items, start=1):
        title = item.get("content_title")
        heading = f"**Item {index}:** {title}" if title else f"**Item {index}:**"
        body = item.get("content_text") or item.get("musings") or ""
        lines = [heading, body]
        if item.get("from_the_box"):
            lines.append(f"**From the Box:** {item['from_the_box']}")
        if item.get("attribution"):
            lines.append(f"- {item['attribution']}")
        blocks.append("\n\n".join(line for line in lines if line))
    return "\n\n---\n\n".join(blocks)
