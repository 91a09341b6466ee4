from enum import Enum

from pydantic import BaseModel


class SourceType(str, Enum):
    TEXT = "text"
    PDF = "pdf"
    AUDIO = "audio"
    YOUTUBE = "youtube"


class NoteCreate(BaseModel):
    title: str
    content: str
    source_type: SourceType = SourceType.TEXT


class NoteUpdate(BaseModel):
    title: str | None = None
    content: str | None = None


class Note(BaseModel):
    id: str
    title: str
    content: str
    source_type: SourceType
    created_at: str
    updated_at: str


class NoteList(BaseModel):
    items: list[Note]
    total: int
    offset: int
    limit: int
