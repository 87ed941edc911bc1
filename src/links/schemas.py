from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ShortenRequest(BaseModel):
    url: str


class ShortenResponse(BaseModel):
    code: str
    short_url: str


class LinkRead(BaseModel):
    code: str
    original_url: str
    visits: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    error: str
