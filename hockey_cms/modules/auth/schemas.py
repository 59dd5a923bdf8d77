from pydantic import BaseModel
from typing import Any, Dict, Optional


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}
