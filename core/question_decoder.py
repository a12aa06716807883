# core/question_decoder.py
import json
from typing import List
from pydantic import ValidationError
from model.question import GeneratedQuestion, QuestionEnvelope
from util.errors import MalformedModelOutput
from util.functions import strip_code_fences
import logging

logger = logging.getLogger(__name__)


def decode_questions(raw: str) -> List[GeneratedQuestion]:
    """
    Parse a model reply that must be {"questions": [...]}.
    Anything else (bad JSON, wrong envelope, an item missing
    question/type/correctAnswer) raises MalformedModelOutput.
    """
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning("quiz.decode.json_error pos=%d", e.pos)
        raise MalformedModelOutput("reply is not JSON") from e

    if not isinstance(data, dict) or "questions" not in data:
        logger.warning("quiz.decode.no_envelope")
        raise MalformedModelOutput('missing "questions" array')

    try:
        envelope = QuestionEnvelope.model_validate(data)
    except ValidationError as e:
        fields = sorted({".".join(str(x) for x in err["loc"]) for err in e.errors()})
        logger.warning("quiz.decode.schema_error fields=%s", ",".join(fields))
        raise MalformedModelOutput(f"invalid fields: {', '.join(fields)}") from e
    return envelope.questions
