# service/course_ai_service.py
from typing import Optional, Sequence
from fastapi import UploadFile
from config.settings import settings
from model.api import (
    AskQuestionResponse,
    ChatHistoryResponse,
    GenerateQuizRequest,
    GenerateQuizResponse,
    UploadDocumentsResponse,
)
from model.document import CourseAIStatus
from repository.course_document_repository import CourseDocumentRepository
from service.document_service import DocumentService
from service.knowledge_service import KnowledgeService
from service.quiz_service import QuizService
from util.enums import ErrorMessage
from util.errors import AppError
import logging

logger = logging.getLogger(__name__)


class CourseAIService:
    """
    Request-level flows of the course AI layer: ingest uploads, tutor Q&A,
    AI status and quiz generation.
    """

    def __init__(
        self,
        documents: DocumentService,
        knowledge: KnowledgeService,
        quizzes: QuizService,
        records: CourseDocumentRepository,
    ) -> None:
        self._documents = documents
        self._knowledge = knowledge
        self._quizzes = quizzes
        self._records = records

    async def upload_documents(
        self, course_id: str, files: Sequence[UploadFile]
    ) -> UploadDocumentsResponse:
        """
        Extract every upload (failures isolated per file), index the successful
        ones and append their metadata to the course record.
        """
        if not files:
            raise AppError.of(ErrorMessage.NO_FILES)

        batch = await self._documents.process_uploads(files)
        if not batch.documents:
            logger.warning(
                "upload.none_processed course=%s failed=%d", course_id, len(batch.failures)
            )
            raise AppError.of(ErrorMessage.NO_DOCUMENTS_PROCESSED)

        chunk_count = await self._knowledge.process_documents(
            course_id, [d.text for d in batch.documents]
        )
        metadata = [d.metadata() for d in batch.documents]
        await self._records.append_many(course_id, metadata)
        logger.info(
            "upload.ok course=%s docs=%d chunks=%d failed=%d",
            course_id,
            len(metadata),
            chunk_count,
            len(batch.failures),
        )
        return UploadDocumentsResponse(
            processedCount=len(metadata),
            chunkCount=chunk_count,
            documents=metadata,
            failed=batch.failures,
        )

    async def ask_question(self, question: str, course_id: str) -> AskQuestionResponse:
        answer = await self._knowledge.answer_question(question, course_id)
        return AskQuestionResponse(
            question=question,
            answer=answer.answer,
            sources=answer.sources,
            timestamp=answer.timestamp,
            courseId=course_id,
        )

    async def chat_history(self, course_id: str) -> ChatHistoryResponse:
        # Conversations are not stored; the record set is always empty.
        return ChatHistoryResponse(chatHistory=[], courseId=course_id)

    async def status(self, course_id: str) -> CourseAIStatus:
        docs = await self._records.all(course_id)
        return CourseAIStatus(
            hasDocuments=bool(docs),
            documentCount=len(docs),
            totalWordCount=sum(d.wordCount for d in docs),
            lastUpdated=docs[-1].processedAt if docs else None,
            aiEnabled=bool(docs),
        )

    async def _quiz_content(self, course_id: str, override: Optional[str]) -> str:
        if override and override.strip():
            return override
        if not await self._records.count(course_id):
            raise AppError.of(ErrorMessage.NO_QUIZ_CONTENT)
        content = await self._knowledge.course_content(
            course_id, max_words=settings.QUIZ_CONTENT_MAX_WORDS
        )
        if not content.strip():
            raise AppError.of(ErrorMessage.NO_QUIZ_CONTENT)
        return content

    async def generate_quiz(
        self, course_id: str, req: GenerateQuizRequest
    ) -> GenerateQuizResponse:
        content = await self._quiz_content(course_id, req.content)
        questions = await self._quizzes.generate_question_variations(
            content, req.questionType, req.difficulty
        )
        # First N in generation order, not a ranked subset.
        selected = questions[: req.numQuestions]
        logger.info(
            "quiz.ok course=%s generated=%d returned=%d",
            course_id,
            len(questions),
            len(selected),
        )
        return GenerateQuizResponse(
            questions=selected,
            totalGenerated=len(questions),
            requested=req.numQuestions,
            difficulty=req.difficulty,
            questionType=req.questionType,
        )
