from pydantic import BaseModel


class CacheVersionRead(BaseModel):
    version: str
    stale: bool = False
