# model/knowledge.py
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class Chunk(BaseModel):
    content: str
    courseId: str


class Answer(BaseModel):
    answer: str
    sources: list[Chunk] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
