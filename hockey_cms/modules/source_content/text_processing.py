"""
Cleanup pipeline applied to pasted source text before it is sent to Gemini.

Each step is a plain ``str -> str`` function; ``process_text`` runs them in
order and reports which steps ran, the resulting counts and the chunks the
text would be split into.
"""

import re
import time
from typing import Callable, Dict, List, Tuple

CHUNK_TARGET_WORDS = 500
CHUNK_MIN_WORDS = 600
SENTENCES_PER_PARAGRAPH = 4


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n")


def remove_decorators(text: str) -> str:
    # Bullets become sentence breaks
    text = re.sub("[\u2022\u25cf\u25cb\u25e6\u25aa\u25ab]", ". ", text)
    text = re.sub("[\u25a1\u25a0\u25fb\u25fc\u25ba\u25b8\u25b9\u25c4\u25c2]", "", text)
    text = re.sub("[\u2014\u2013]", "-", text)
    return re.sub("[\u2020\u2021\u00a7\u00b6]", "", text)


def remove_invisible_characters(text: str) -> str:
    return re.sub("[\u200b-\u200d\ufeff\u00ad]", "", text)


def normalize_quotes(text: str) -> str:
    text = re.sub("[\u201c\u201d\u00ab\u00bb]", '"', text)
    return re.sub("[\u2018\u2019\u2039\u203a]", "'", text)


def normalize_capitalization(text: str) -> str:
    """Long runs of capitals become title case; acronyms of up to four letters are kept"""
    return re.sub(r"\b([A-Z]{5,})\b", lambda m: m.group(1)[0] + m.group(1)[1:].lower(), text)


def join_lines(text: str) -> str:
    return re.sub(r"\n+", " ", text)


def fix_spacing(text: str) -> str:
    text = re.sub(r"\s{2,}", " ", text)
    text = re.sub(r"\s+([.,!?;:])", r"\1", text)
    # Digits after punctuation stay attached, e.g. 1,234
    text = re.sub(r"([.,!?;:])([A-Za-z])", r"\1 \2", text)
    return re.sub(r"\.{4,}", "...", text)


def final_cleanup(text: str) -> str:
    text = text.strip()
    text = re.sub(r"\.{2,}\s", ". ", text)
    return re.sub(r"\s{2,}", " ", text)


PROCESSING_STEPS: List[Tuple[str, str, Callable[[str], str]]] = [
    ("line-endings", "Normalize line endings", normalize_line_endings),
    ("remove-decorators", "Remove visual decorators", remove_decorators),
    ("remove-unicode", "Clean invisible characters", remove_invisible_characters),
    ("smart-quotes", "Normalize quotes", normalize_quotes),
    ("normalize-caps", "Normalize capitalization", normalize_capitalization),
    ("join-sentences", "Join broken sentences", join_lines),
    ("fix-spacing", "Fix spacing issues", fix_spacing),
    ("final-cleanup", "Final cleanup", final_cleanup),
]


def count_words(text: str) -> int:
    return len(text.split())


def smart_chunk(
    text: str,
    target_words: int = CHUNK_TARGET_WORDS,
    min_words_to_chunk: int = CHUNK_MIN_WORDS,
) -> List[str]:
    """
    Split long text into chunks of roughly ``target_words`` words.

    Text shorter than ``min_words_to_chunk`` is returned whole. Paragraphs
    (blank-line separated) are kept intact; when there are none, sentences
    are grouped four at a time into paragraphs first.
    """
    if count_words(text) < min_words_to_chunk:
        return [text]

    paragraphs = [p for p in re.split(r"\n\n+", text) if p.strip()]
    if len(paragraphs) == 1:
        sentences = [s for s in re.findall(r"[^.!?]+(?:[.!?]+|$)", text) if s.strip()] or [text]
        paragraphs = []
        current = []
        for sentence in sentences:
            current.append(sentence.strip())
            if len(current) >= SENTENCES_PER_PARAGRAPH:
                paragraphs.append(" ".join(current))
                current = []
        if current:
            paragraphs.append(" ".join(current))

    chunks = []
    chunk: List[str] = []
    chunk_words = 0
    for paragraph in paragraphs:
        words = count_words(paragraph)
        if chunk_words + words > target_words and chunk:
            chunks.append("\n\n".join(chunk))
            chunk = [paragraph]
            chunk_words = words
        else:
            chunk.append(paragraph)
            chunk_words += words
    if chunk:
        chunks.append("\n\n".join(chunk))
    return chunks or [text]


def process_text(text: str) -> Dict:
    started = time.perf_counter()
    processed = text
    steps = []
    for step_id, name, step in PROCESSING_STEPS:
        processed = step(processed)
        steps.append({"id": step_id, "name": name, "completed": True})
    return {
        "originalText": text,
        "processedText": processed,
        "chunks": smart_chunk(processed),
        "steps": steps,
        "wordCount": count_words(processed),
        "charCount": len(processed),
        "processingTime": int((time.perf_counter() - started) * 1000),
    }
