import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from config.settings import settings
from core.question_decoder import decode_questions
from service import quiz_service
from service.quiz_service import QuizService
from util.enums import Difficulty, QuestionType, QuizQuestionType
from util.errors import MalformedModelOutput

CONTENT = "Photosynthesis converts light energy into chemical energy stored in glucose."


def _mc(n):
    return [
        {
            "question": f"MC question {i}?",
            "type": "multiple-choice",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": "B",
            "explanation": "Because B.",
            "points": 1,
        }
        for i in range(n)
    ]


def _tf(n):
    return [
        {"question": f"TF statement {i}", "type": "true-false", "correctAnswer": i % 2 == 0}
        for i in range(n)
    ]


def _sa(n):
    return [
        {
            "question": f"SA question {i}?",
            "type": "short-answer",
            "correctAnswer": "Chlorophyll",
            "points": 2,
        }
        for i in range(n)
    ]


def _reply_for(prompt: str) -> str:
    if "multiple-choice quiz questions" in prompt:
        items = _mc(3)
    elif "true/false questions" in prompt:
        items = _tf(2)
    elif "short answer questions" in prompt:
        items = _sa(2)
    else:
        raise AssertionError("unexpected prompt")
    return json.dumps({"questions": items})


@pytest.fixture
def model(monkeypatch):
    async def _complete(*, system, prompt, **kwargs):
        return _reply_for(prompt)

    mock = AsyncMock(side_effect=_complete)
    monkeypatch.setattr(quiz_service, "complete", mock)
    return mock


class TestQuestionVariations:
    def test_mixed_returns_seven_in_fixed_order(self, model):
        questions = asyncio.run(
            QuizService().generate_question_variations(CONTENT, QuizQuestionType.mixed)
        )

        assert len(questions) == 3 + 2 + 2
        assert [q.type for q in questions] == (
            [QuestionType.multiple_choice] * 3
            + [QuestionType.true_false] * 2
            + [QuestionType.short_answer] * 2
        )
        assert model.await_count == 3

    def test_single_type_is_one_request(self, model):
        questions = asyncio.run(
            QuizService().generate_question_variations(CONTENT, QuizQuestionType.true_false)
        )

        assert model.await_count == 1
        assert [q.correctAnswer for q in questions] == [True, False]
        assert all(isinstance(q.correctAnswer, bool) for q in questions)

    def test_prompt_carries_count_difficulty_and_content(self, model):
        asyncio.run(
            QuizService().generate_question_variations(
                CONTENT, QuizQuestionType.multiple_choice, Difficulty.hard
            )
        )

        prompt = model.await_args.kwargs["prompt"]
        assert "Generate 3 multiple-choice quiz questions" in prompt
        assert "Difficulty level: hard" in prompt
        assert CONTENT in prompt
        assert model.await_args.kwargs["system"] == settings.QUIZ_SYSTEM_PROMPT

    def test_long_content_is_clipped(self, model, monkeypatch):
        monkeypatch.setattr(settings, "QUIZ_CONTENT_MAX_WORDS", 5)
        asyncio.run(
            QuizService().generate_question_variations(
                "one two three four five six seven", QuizQuestionType.short_answer
            )
        )
        prompt = model.await_args.kwargs["prompt"]
        assert "one two three four five …" in prompt
        assert "six" not in prompt


class TestRetry:
    def test_malformed_reply_is_retried_once(self, monkeypatch):
        mock = AsyncMock(side_effect=["Sure! Here are your questions:", json.dumps({"questions": _sa(2)})])
        monkeypatch.setattr(quiz_service, "complete", mock)

        questions = asyncio.run(
            QuizService().generate_questions(CONTENT, QuestionType.short_answer, 2)
        )

        assert len(questions) == 2
        assert mock.await_count == 2
        retry = mock.await_args_list[1].kwargs
        assert retry["prompt"].endswith(settings.QUIZ_STRICT_SUFFIX)
        assert retry["temperature"] == 0.0

    def test_second_failure_surfaces(self, monkeypatch):
        mock = AsyncMock(return_value='{"items": []}')
        monkeypatch.setattr(quiz_service, "complete", mock)

        with pytest.raises(MalformedModelOutput) as err:
            asyncio.run(QuizService().generate_questions(CONTENT, QuestionType.true_false, 2))
        assert mock.await_count == 2
        assert err.value.status_code == 502


class TestDecoder:
    def test_accepts_code_fenced_json(self):
        raw = "```json\n" + json.dumps({"questions": _mc(1)}) + "\n```"
        [q] = decode_questions(raw)
        assert q.options == ["A", "B", "C", "D"]
        assert q.correctAnswer == "B"
        assert q.points == 1

    def test_defaults_for_optional_fields(self):
        [q] = decode_questions(
            json.dumps({"questions": [{"question": "Q?", "type": "essay", "correctAnswer": "Any"}]})
        )
        assert q.options is None
        assert q.points == 1
        assert q.explanation == ""

    @pytest.mark.parametrize("alias", ["Multiple Choice", "multiple_choice", "MULTIPLE-CHOICE"])
    def test_type_spellings_are_normalized(self, alias):
        [q] = decode_questions(
            json.dumps({"questions": [{"question": "Q?", "type": alias, "correctAnswer": "A"}]})
        )
        assert q.type == QuestionType.multiple_choice

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            json.dumps({"quiz": []}),
            json.dumps({"questions": "three"}),
            json.dumps({"questions": [{"type": "true-false", "correctAnswer": True}]}),
            json.dumps({"questions": [{"question": "Q?", "correctAnswer": True}]}),
            json.dumps({"questions": [{"question": "Q?", "type": "true-false"}]}),
            json.dumps({"questions": [{"question": "Q?", "type": "riddle", "correctAnswer": "x"}]}),
        ],
    )
    def test_rejects_bad_shapes(self, raw):
        with pytest.raises(MalformedModelOutput):
            decode_questions(raw)
