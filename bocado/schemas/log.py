"""Client log sink schema."""

from typing import Optional

from pydantic import BaseModel


class ClientLogEntry(BaseModel):
    level: str = "info"
    module: str = "client"
    message: str
    data: Optional[dict] = None
