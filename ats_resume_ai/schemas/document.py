"""Uploaded résumé document (in-memory, never persisted)."""

from pydantic import BaseModel, Field


class UploadedDocument(BaseModel):
    """Raw upload: bytes plus the declared MIME type and file name."""

    content: bytes = Field(..., description="Raw file bytes")
    mime_type: str = Field(default="", description="Declared MIME type from the client")
    filename: str = Field(default="", description="Original file name")

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        name = (self.filename or "").lower().strip()
        dot = name.rfind(".")
        return name[dot:] if dot != -1 else ""
