# repository/course_document_repository.py
from typing import List
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from model.document import DocumentMetadata
from repository.namespaces import DOCUMENTS
from util.errors import StoreUnavailable
import logging

logger = logging.getLogger(__name__)


class CourseDocumentRepository:
    """
    Flow:
    - Append the metadata of each ingested document to a Redis list (RPUSH) keyed by courseId.
    - The list is the course's record of what the AI layer has been taught.
    """

    @staticmethod
    def _key(course_id: str) -> str:
        return f"{DOCUMENTS}:{course_id}"

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    async def append_many(self, course_id: str, docs: List[DocumentMetadata]) -> int:
        if not docs:
            return await self.count(course_id)
        payloads = [d.model_dump_json().encode("utf-8") for d in docs]
        try:
            r = await self._client()
            return int(await r.rpush(self._key(course_id), *payloads))
        except (RedisError, OSError) as e:
            logger.error("documents.append.error course=%s err=%s", course_id, type(e).__name__)
            raise StoreUnavailable() from e

    async def all(self, course_id: str) -> List[DocumentMetadata]:
        try:
            r = await self._client()
            vals = await r.lrange(self._key(course_id), 0, -1)
        except (RedisError, OSError) as e:
            logger.error("documents.read.error course=%s err=%s", course_id, type(e).__name__)
            raise StoreUnavailable() from e
        out: List[DocumentMetadata] = []
        for raw in vals or []:
            try:
                out.append(DocumentMetadata.model_validate_json(raw))
            except ValidationError:
                # Skip malformed entries instead of failing the whole listing
                logger.warning("documents.read.skip course=%s", course_id)
                continue
        return out

    async def count(self, course_id: str) -> int:
        try:
            r = await self._client()
            return int(await r.llen(self._key(course_id)) or 0)
        except (RedisError, OSError) as e:
            raise StoreUnavailable() from e
