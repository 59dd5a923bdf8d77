from pydantic import AfterValidator
from typing import Annotated


def _require_text(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("must not be empty")
    return value.strip()


# Non-blank string, surrounding whitespace stripped
RequiredText = Annotated[str, AfterValidator(_require_text)]
