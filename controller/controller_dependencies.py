# controller/controller_dependencies.py
from typing import List
from fastapi import File, HTTPException, Request, UploadFile
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from repository.course_document_repository import CourseDocumentRepository
from repository.course_index_repository import CourseIndexRepository
from service.course_ai_service import CourseAIService
from service.document_service import DocumentService
from service.knowledge_service import KnowledgeService
from service.quiz_service import QuizService
from util.enums import ErrorMessage
from util.errors import AppError

rate_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
)


def get_course_ai_service() -> CourseAIService:
    _documents = DocumentService()
    _knowledge = KnowledgeService(CourseIndexRepository())
    _quizzes = QuizService()
    _records = CourseDocumentRepository()
    return CourseAIService(_documents, _knowledge, _quizzes, _records)


def _too_large(name: str) -> HTTPException:
    # JSON envelope for 413
    return HTTPException(
        status_code=413,
        detail={
            "ok": False,
            "error": "file_too_large",
            "fileName": name,
            "maxMb": settings.MAX_FILE_MB,
        },
    )


async def enforce_upload_limits(
    request: Request, documents: List[UploadFile] = File(default=[])
) -> List[UploadFile]:
    MAX_BYTES = settings.MAX_FILE_MB * 1024 * 1024

    if not documents:
        raise AppError.of(ErrorMessage.NO_FILES)
    if len(documents) > settings.MAX_FILES_PER_UPLOAD:
        raise AppError.of(
            ErrorMessage.TOO_MANY_FILES, f"at most {settings.MAX_FILES_PER_UPLOAD}"
        )

    # Fast pre-check via Content-Length if present (covers the whole multipart body)
    cl = request.headers.get("content-length")
    if cl and cl.isdigit() and int(cl) > MAX_BYTES * settings.MAX_FILES_PER_UPLOAD:
        raise _too_large("(request)")

    # Hard cap per file while reading (works even if no Content-Length)
    for file in documents:
        blob = await file.read(MAX_BYTES + 1)
        if len(blob) > MAX_BYTES:
            raise _too_large(file.filename or "upload")
        # Reset so downstream can re-read file stream
        await file.seek(0)
    return documents
