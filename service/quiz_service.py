# service/quiz_service.py
import asyncio
from typing import Dict, List, Tuple
from config.settings import settings
from core.anthropic_client import complete
from core.question_decoder import decode_questions
from model.question import GeneratedQuestion
from util.enums import Difficulty, QuestionType, QuizQuestionType
from util.errors import MalformedModelOutput
from util.functions import clip_words
import logging

logger = logging.getLogger(__name__)


def _templates() -> Dict[QuestionType, str]:
    return {
        QuestionType.multiple_choice: settings.MULTIPLE_CHOICE_TEMPLATE,
        QuestionType.true_false: settings.TRUE_FALSE_TEMPLATE,
        QuestionType.short_answer: settings.SHORT_ANSWER_TEMPLATE,
    }


def _default_counts() -> Dict[QuestionType, int]:
    return {
        QuestionType.multiple_choice: settings.QUIZ_MULTIPLE_CHOICE_COUNT,
        QuestionType.true_false: settings.QUIZ_TRUE_FALSE_COUNT,
        QuestionType.short_answer: settings.QUIZ_SHORT_ANSWER_COUNT,
    }


# Fixed concatenation order for "mixed".
MIXED_ORDER: Tuple[QuestionType, ...] = (
    QuestionType.multiple_choice,
    QuestionType.true_false,
    QuestionType.short_answer,
)


class QuizService:
    async def generate_questions(
        self,
        course_content: str,
        kind: QuestionType,
        count: int,
        difficulty: Difficulty = Difficulty.medium,
    ) -> List[GeneratedQuestion]:
        """
        One generation request for `kind`. A reply that fails to decode is
        retried once with a stricter instruction; a second failure raises
        MalformedModelOutput.
        """
        prompt = _templates()[kind].format(
            count=count, difficulty=difficulty.value, content=course_content
        )
        purpose = f"quiz.{kind.value}"
        raw = await complete(
            system=settings.QUIZ_SYSTEM_PROMPT,
            prompt=prompt,
            max_tokens=settings.QUIZ_MAX_TOKENS,
            purpose=purpose,
        )
        try:
            questions = decode_questions(raw)
        except MalformedModelOutput:
            logger.warning("quiz.retry type=%s", kind.value)
            raw = await complete(
                system=settings.QUIZ_SYSTEM_PROMPT,
                prompt=prompt + settings.QUIZ_STRICT_SUFFIX,
                max_tokens=settings.QUIZ_MAX_TOKENS,
                temperature=0.0,
                purpose=purpose,
            )
            questions = decode_questions(raw)
        logger.info("quiz.generated type=%s count=%d", kind.value, len(questions))
        return questions

    async def generate_question_variations(
        self,
        course_content: str,
        question_type: QuizQuestionType = QuizQuestionType.mixed,
        difficulty: Difficulty = Difficulty.medium,
    ) -> List[GeneratedQuestion]:
        """
        "mixed" runs the multiple-choice, true/false and short-answer requests
        concurrently and concatenates them in that order; any other type is a
        single request.
        """
        content = clip_words(course_content, max_words=settings.QUIZ_CONTENT_MAX_WORDS)
        counts = _default_counts()
        if question_type == QuizQuestionType.mixed:
            plan = list(MIXED_ORDER)
        else:
            plan = [QuestionType(question_type.value)]

        batches = await asyncio.gather(
            *(
                self.generate_questions(content, kind, counts[kind], difficulty)
                for kind in plan
            )
        )
        out = [q for batch in batches for q in batch]
        logger.info("quiz.variations type=%s total=%d", question_type.value, len(out))
        return out
