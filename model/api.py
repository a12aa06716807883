# model/api.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from model.document import DocumentMetadata, FailedDocument
from model.knowledge import Chunk
from model.question import GeneratedQuestion
from util.enums import Difficulty, QuizQuestionType


class AskQuestionRequest(BaseModel):
    question: str = Field(min_length=1)
    courseId: str = Field(min_length=1)


class AskQuestionResponse(BaseModel):
    question: str
    answer: str
    sources: list[Chunk]
    timestamp: datetime
    courseId: str


class ChatHistoryResponse(BaseModel):
    chatHistory: list[dict] = Field(default_factory=list)
    courseId: str


class UploadDocumentsResponse(BaseModel):
    processedCount: int
    chunkCount: int
    documents: list[DocumentMetadata]
    failed: list[FailedDocument] = Field(default_factory=list)


class GenerateQuizRequest(BaseModel):
    numQuestions: int = Field(default=5, ge=1, le=50)
    difficulty: Difficulty = Difficulty.medium
    questionType: QuizQuestionType = QuizQuestionType.mixed
    # Optional override; otherwise the course's indexed material is used.
    content: Optional[str] = None


class GenerateQuizResponse(BaseModel):
    questions: list[GeneratedQuestion]
    totalGenerated: int
    requested: int
    difficulty: Difficulty
    questionType: QuizQuestionType
