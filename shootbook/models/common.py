from pydantic import BaseModel, Field
from datetime import datetime, timezone
import time
import uuid

def gen_id() -> str:
    # horodatage ms + suffixe aléatoire (unique sur un appareil, pas globalement)
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:9]}"

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class TimeStamped(BaseModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
