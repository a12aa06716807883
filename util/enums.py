# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class FileType(str, Enum):
    pdf = "pdf"
    docx = "docx"
    doc = "doc"
    txt = "txt"
    html = "html"


class QuestionType(str, Enum):
    multiple_choice = "multiple-choice"
    true_false = "true-false"
    short_answer = "short-answer"
    essay = "essay"


class QuizQuestionType(str, Enum):
    # What a caller may ask the generator for; "mixed" fans out to the first three.
    multiple_choice = "multiple-choice"
    true_false = "true-false"
    short_answer = "short-answer"
    mixed = "mixed"


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNSUPPORTED_FORMAT = ErrorInfo(
        "Unsupported file format", status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    )
    EXTRACTION_FAILURE = ErrorInfo(
        "Could not extract text from file", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    STORE_UNAVAILABLE = ErrorInfo(
        "Course knowledge base is unavailable", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    MODEL_UNAVAILABLE = ErrorInfo(
        "Language model is unavailable", status.HTTP_502_BAD_GATEWAY
    )
    MALFORMED_MODEL_OUTPUT = ErrorInfo(
        "Language model returned malformed output", status.HTTP_502_BAD_GATEWAY
    )
    EMPTY_CONTEXT = ErrorInfo(
        "No course material has been uploaded for this course",
        status.HTTP_409_CONFLICT,
    )
    NO_FILES = ErrorInfo("No files uploaded", status.HTTP_400_BAD_REQUEST)
    TOO_MANY_FILES = ErrorInfo("Too many files", status.HTTP_400_BAD_REQUEST)
    NO_DOCUMENTS_PROCESSED = ErrorInfo(
        "No documents could be processed", status.HTTP_400_BAD_REQUEST
    )
    NO_QUIZ_CONTENT = ErrorInfo(
        "No documents available for quiz generation. Please upload course materials first.",
        status.HTTP_400_BAD_REQUEST,
    )
