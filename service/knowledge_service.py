# service/knowledge_service.py
import asyncio
from typing import List, Sequence
from config.settings import settings
from core.anthropic_client import complete
from core.chunker import chunk_texts, merge_windows
from core.course_index import add_chunks, retrieve
from core.entities import CourseIndex
from model.knowledge import Answer, Chunk
from repository.course_index_repository import CourseIndexRepository
from util.errors import EmptyContext
from util.functions import clip_words
from util.locks import KeyedLocks, course_index_locks
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


def _tutor_prompt(question: str, sources: Sequence[Chunk]) -> str:
    """
    Build the user message: numbered course excerpts, then the question verbatim.
    """
    if sources:
        context = "\n\n---\n\n".join(
            f"[{i}] {c.content.strip()}" for i, c in enumerate(sources, start=1)
        )
    else:
        context = settings.NO_CONTEXT_NOTICE
    return f"CONTEXT:\n{context}\n\nQUESTION:\n{question}\n\nANSWER:"


class KnowledgeService:
    """
    Per-course knowledge base: chunk and index course text, answer questions
    against it through the hosted model.
    """

    def __init__(
        self, indexes: CourseIndexRepository, locks: KeyedLocks = course_index_locks
    ) -> None:
        self._indexes = indexes
        self._locks = locks

    async def initialize_vector_store(self, course_id: str) -> CourseIndex:
        """Open-or-create; a course with no material yields an empty index."""
        return await self._indexes.open(course_id)

    async def process_documents(self, course_id: str, documents: Sequence[str]) -> int:
        """
        Chunk `documents` and append them to the course index, then persist it.
        open -> add -> save runs under the course's writer lock so concurrent
        uploads to one course never overwrite each other's chunks.
        """
        texts = chunk_texts(documents, settings.CHUNK_SIZE, settings.CHUNK_OVERLAP)
        if not texts:
            logger.info("knowledge.process.empty course=%s", course_id)
            return 0
        chunks = [Chunk(content=t, courseId=course_id) for t in texts]

        with timed(logger, "knowledge.process", course=course_id, chunks=len(chunks)):
            async with self._locks.for_key(course_id):
                index = await self._indexes.open(course_id)
                await asyncio.to_thread(add_chunks, index, chunks)
                await self._indexes.save(index)
        return len(chunks)

    async def answer_question(self, question: str, course_id: str) -> Answer:
        index = await self.initialize_vector_store(course_id)
        sources: List[Chunk] = await asyncio.to_thread(
            retrieve, index, question, settings.RETRIEVAL_K
        )
        if not sources:
            logger.warning("knowledge.answer.no_context course=%s", course_id)
            if settings.ANSWER_REQUIRE_CONTEXT:
                raise EmptyContext()

        # No index lock is held here; the model call is the slow part.
        text = await complete(
            system=settings.TUTOR_SYSTEM_PROMPT,
            prompt=_tutor_prompt(question, sources),
            max_tokens=1000,
            purpose="answer",
        )
        logger.info(
            "knowledge.answer course=%s sources=%d", course_id, len(sources)
        )
        return Answer(answer=text.strip(), sources=sources)

    async def course_content(self, course_id: str, max_words: int) -> str:
        """Indexed course text, in upload order, capped at `max_words`."""
        index = await self.initialize_vector_store(course_id)
        joined = merge_windows(
            [c.content for c in index.chunks], overlap=settings.CHUNK_OVERLAP
        )
        return clip_words(joined, max_words=max_words)
