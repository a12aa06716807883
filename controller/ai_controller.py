# controller/ai_controller.py
from typing import List
from fastapi import APIRouter, Depends, UploadFile, status
from controller.controller_dependencies import (
    enforce_upload_limits,
    get_course_ai_service,
    rate_limiter,
)
from model.api import (
    AskQuestionRequest,
    AskQuestionResponse,
    ChatHistoryResponse,
    GenerateQuizRequest,
    GenerateQuizResponse,
    UploadDocumentsResponse,
)
from model.document import CourseAIStatus
from service.course_ai_service import CourseAIService
from util.constants import InternalURIs

ai_router = APIRouter(dependencies=[Depends(rate_limiter)])


@ai_router.post(
    InternalURIs.ASK_QUESTION,
    response_model=AskQuestionResponse,
    status_code=status.HTTP_200_OK,
)
async def ask_question(
    payload: AskQuestionRequest,
    service: CourseAIService = Depends(get_course_ai_service),
) -> AskQuestionResponse:
    return await service.ask_question(payload.question, payload.courseId)


@ai_router.get(InternalURIs.CHAT_HISTORY, response_model=ChatHistoryResponse)
async def chat_history(
    courseId: str,
    service: CourseAIService = Depends(get_course_ai_service),
) -> ChatHistoryResponse:
    return await service.chat_history(courseId)


@ai_router.get(InternalURIs.AI_STATUS, response_model=CourseAIStatus)
async def ai_status(
    courseId: str,
    service: CourseAIService = Depends(get_course_ai_service),
) -> CourseAIStatus:
    return await service.status(courseId)


@ai_router.post(
    InternalURIs.UPLOAD_DOCUMENTS,
    response_model=UploadDocumentsResponse,
    status_code=status.HTTP_200_OK,
)
async def upload_documents(
    courseId: str,
    documents: List[UploadFile] = Depends(enforce_upload_limits),
    service: CourseAIService = Depends(get_course_ai_service),
) -> UploadDocumentsResponse:
    return await service.upload_documents(courseId, documents)


@ai_router.post(InternalURIs.GENERATE_QUIZ, response_model=GenerateQuizResponse)
async def generate_quiz(
    courseId: str,
    payload: GenerateQuizRequest,
    service: CourseAIService = Depends(get_course_ai_service),
) -> GenerateQuizResponse:
    return await service.generate_quiz(courseId, payload)
