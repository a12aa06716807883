# model/question.py
from typing import Optional, Union
from pydantic import BaseModel, field_validator
from util.enums import QuestionType


class GeneratedQuestion(BaseModel):
    question: str
    type: QuestionType
    options: Optional[list[str]] = None
    correctAnswer: Union[bool, str]
    points: int = 1
    explanation: str = ""
    difficulty: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, v):
        # "Multiple Choice" / "multiple_choice" -> "multiple-choice"
        if isinstance(v, str):
            return "-".join(v.strip().lower().replace("_", " ").replace("/", " ").split())
        return v

    @field_validator("question")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question must not be blank")
        return v


class QuestionEnvelope(BaseModel):
    questions: list[GeneratedQuestion]
