"""Photo upload schemas."""

from pydantic import BaseModel, Field


class PhotoUploadResponse(BaseModel):
    success: bool
    uploaded_urls: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    message: str


class SinglePhotoUploadResponse(BaseModel):
    success: bool = True
    url: str
    file_name: str
    original_name: str
    size: int
