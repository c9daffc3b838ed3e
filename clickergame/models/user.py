from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class User(BaseModel):
    id: int
    username: str
    password_hash: str
    balance: float
    income_per_click: float
    auto_income_per_second: float
    created_at: str = Field(default_factory=_utcnow_iso)
