"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class Book(BaseModel):
    """Book document as stored in the index."""
    title: str = Field("", description="Book title")
    author: str = Field("", description="Book author")
    year: int = Field(0, description="Publication year")

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def from_source(cls, source: Dict[str, Any]) -> "Book":
        """
        Build a Book from a stored document.

        Partial updates can leave fields null or of another type; such
        fields keep their empty value instead of failing the read.
        """
        values = {}
        for name, adapter in _FIELD_ADAPTERS.items():
            value = source.get(name)
            if value is None:
                continue
            try:
                values[name] = adapter.validate_python(value)
            except ValidationError:
                continue
        return cls(**values)


_FIELD_ADAPTERS = {
    name: TypeAdapter(field.annotation) for name, field in Book.model_fields.items()
}

# Accepts any JSON object as a partial update
BookUpdate = TypeAdapter(Dict[str, Any])


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")

    def render(self) -> str:
        """Plain-text body for the response."""
        if self.detail:
            return f"{self.error}: {self.detail}\n"
        return f"{self.error}\n"


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    index_status: str = Field(..., description="Index engine connection status")
