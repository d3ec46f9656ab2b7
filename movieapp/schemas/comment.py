"""
Comment Schemas - request/response validation for movie comments
"""

from pydantic import Field, field_validator
from datetime import datetime
from typing import Optional

from movieapp.schemas.base import CamelModel, as_utc
from movieapp.schemas.validation import SafeStringMixin

CONTENT_MIN_LENGTH = 3
CONTENT_MAX_LENGTH = 1000
LENGTH_ERROR = f"Comment must be between {CONTENT_MIN_LENGTH} and {CONTENT_MAX_LENGTH} characters"


def clean_content(value: str) -> str:
    """Length-check the typed text, then sanitize it"""
    value = value.strip()
    if not CONTENT_MIN_LENGTH <= len(value) <= CONTENT_MAX_LENGTH:
        raise ValueError(LENGTH_ERROR)
    value = SafeStringMixin.sanitize_html(SafeStringMixin.validate_no_script(value)).strip()
    if len(value) < CONTENT_MIN_LENGTH:
        raise ValueError(LENGTH_ERROR)
    return value


class CommentCreate(CamelModel):
    """Schema for posting a comment on a movie"""
    movie_id: int = Field(..., description="TMDB movie ID", gt=0)
    content: str = Field(..., description="Comment text")

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v)


class CommentUpdate(CamelModel):
    """Schema for editing a comment; id is optional but must match the path when sent"""
    id: Optional[int] = None
    content: str

    @field_validator('content')
    @classmethod
    def validate_content(cls, v):
        return clean_content(v)


class CommentAuthor(CamelModel):
    id: int
    user_name: str


class CommentResponse(CamelModel):
    id: int
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    user_id: int
    movie_id: int
    user: Optional[CommentAuthor] = None

    @field_validator('created_at', 'updated_at')
    @classmethod
    def utc_timestamps(cls, v):
        return as_utc(v)
