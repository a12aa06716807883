# model/document.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from util.enums import FileType


class ExtractedDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    wordCount: int
    fileName: str
    fileType: FileType
    processedAt: datetime

    def metadata(self) -> "DocumentMetadata":
        return DocumentMetadata(
            fileName=self.fileName,
            fileType=self.fileType,
            wordCount=self.wordCount,
            processedAt=self.processedAt,
        )


class DocumentMetadata(BaseModel):
    """What a course keeps about each ingested document (the text lives in the index)."""

    fileName: str
    fileType: FileType
    wordCount: int
    processedAt: datetime


class FailedDocument(BaseModel):
    fileName: str
    error: str


class CourseAIStatus(BaseModel):
    hasDocuments: bool
    documentCount: int
    totalWordCount: int
    lastUpdated: Optional[datetime] = None
    aiEnabled: bool
