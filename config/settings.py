# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    MAX_FILE_MB: int = Field(default=10, validation_alias="MAX_FILE_MB")
    MAX_FILES_PER_UPLOAD: int = Field(default=10, validation_alias="MAX_FILES_PER_UPLOAD")
    UPLOAD_DIR: str = Field(default="uploads/courses", validation_alias="UPLOAD_DIR")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # Anthropic Settings
    ANTHROPIC_API_URL: str = Field(..., validation_alias="ANTHROPIC_API_URL")
    ANTHROPIC_API_KEY: str = Field(..., validation_alias="ANTHROPIC_API_KEY")
    ANTHROPIC_MODEL: str = Field(..., validation_alias="ANTHROPIC_MODEL")
    ANTHROPIC_VERSION: str = Field(
        default="2023-06-01", validation_alias="ANTHROPIC_VERSION"
    )
    ANTHROPIC_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="ANTHROPIC_TIMEOUT_SECONDS"
    )
    ANTHROPIC_TEMPERATURE: float = 0.7

    # Embedding Engine
    EMBEDDING_MODEL_NAME: str = "sentence-transformers/all-MiniLM-L6-v2"
    EMBEDDING_BATCH_SIZE: int = 64

    # Knowledge base
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200
    RETRIEVAL_K: int = 4
    ANSWER_REQUIRE_CONTEXT: bool = Field(
        default=False, validation_alias="ANSWER_REQUIRE_CONTEXT"
    )

    # Quiz generation
    QUIZ_MULTIPLE_CHOICE_COUNT: int = 3
    QUIZ_TRUE_FALSE_COUNT: int = 2
    QUIZ_SHORT_ANSWER_COUNT: int = 2
    QUIZ_CONTENT_MAX_WORDS: int = 3000
    QUIZ_MAX_TOKENS: int = 2000

    # Logging knobs
    LOGGER_NAME: str = "coursemind"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts
    TUTOR_SYSTEM_PROMPT: str = (
        "You are an AI tutor for a learning management system. Answer the student's question "
        "based on the provided context from course materials. Be helpful, accurate, and educational.\n"
        "\n"
        "Rules:\n"
        "- Ground the answer in the CONTEXT excerpts; do not invent course facts.\n"
        "- Provide a clear, comprehensive answer.\n"
        "- If the context doesn't contain enough information, say so and suggest where the student "
        "might find more information.\n"
        "- If the context says no course material is available, tell the student that no course "
        "materials have been uploaded yet before answering from general knowledge.\n"
    )

    NO_CONTEXT_NOTICE: str = "(no course material has been uploaded for this course)"

    QUIZ_SYSTEM_PROMPT: str = (
        "You write quiz questions for a learning management system.\n"
        "\n"
        "Rules:\n"
        "- Ensure questions test understanding, not just memorization.\n"
        "- Base questions directly on the provided course content.\n"
        "- Provide a clear explanation for every correct answer.\n"
        '- Return JSON ONLY, shaped exactly as {"questions":[...]}.\n'
        "- No code fences, no prose outside the JSON object.\n"
    )

    QUIZ_STRICT_SUFFIX: str = (
        "\n\nYour previous reply could not be parsed. Reply with a single JSON object and nothing else. "
        'It MUST have a top-level "questions" array and every item MUST include '
        '"question", "type" and "correctAnswer".'
    )

    MULTIPLE_CHOICE_TEMPLATE: str = (
        "Generate {count} multiple-choice quiz questions based on the following course content.\n"
        "Difficulty level: {difficulty}\n"
        "\n"
        "Course Content:\n{content}\n"
        "\n"
        "Return in JSON format:\n"
        '{{"questions":[{{"question":"Question text here","type":"multiple-choice",'
        '"options":["Option A","Option B","Option C","Option D"],"correctAnswer":"Option B",'
        '"explanation":"Explanation of why this is correct","difficulty":"{difficulty}","points":1}}]}}\n'
        "\n"
        "Make every option plausible; correctAnswer must equal one of the options."
    )

    TRUE_FALSE_TEMPLATE: str = (
        "Generate {count} true/false questions based on the following course content.\n"
        "Difficulty level: {difficulty}\n"
        "\n"
        "Course Content:\n{content}\n"
        "\n"
        "Return in JSON format:\n"
        '{{"questions":[{{"question":"Statement here","type":"true-false","correctAnswer":true,'
        '"explanation":"Explanation here","difficulty":"{difficulty}","points":1}}]}}'
    )

    SHORT_ANSWER_TEMPLATE: str = (
        "Generate {count} short answer questions based on the following course content.\n"
        "Difficulty level: {difficulty}\n"
        "\n"
        "Course Content:\n{content}\n"
        "\n"
        "Return in JSON format:\n"
        '{{"questions":[{{"question":"Question here","type":"short-answer",'
        '"correctAnswer":"Expected answer","explanation":"Explanation here",'
        '"difficulty":"{difficulty}","points":2}}]}}'
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
