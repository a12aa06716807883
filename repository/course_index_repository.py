# repository/course_index_repository.py
import io
import json
from typing import Dict, Final, Mapping, Optional, Union
import numpy as np
from redis.asyncio import Redis
from redis.exceptions import RedisError
from config.cache import get_redis
from core.entities import CourseIndex
from model.knowledge import Chunk
from repository.namespaces import INDEXES
from util.errors import StoreUnavailable
import logging

logger = logging.getLogger(__name__)

KEY_PREFIX: Final[str] = INDEXES


class CourseIndexRepository:
    """
    Redis-backed snapshots of course similarity indexes keyed by course id.

    Flow:
    - A snapshot is one hash: "embeddings" (.npy bytes) and "chunks" (JSON list of texts).
    - save() writes every field in a single HSET, so readers see either the
      previous snapshot or the new one, never a mix.
    - No TTL; indexes live as long as the course does.
    """

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    @staticmethod
    def _key(course_id: str) -> str:
        return f"{KEY_PREFIX}:{course_id}"

    # ---------------- Snapshot codec ----------------

    @staticmethod
    def _encode(index: CourseIndex) -> Dict[str, bytes]:
        buf = io.BytesIO()
        np.save(buf, np.ascontiguousarray(index.embeddings, dtype=np.float32), allow_pickle=False)
        texts = [c.content for c in index.chunks]
        return {
            "courseId": index.course_id.encode("utf-8"),
            "count": str(len(texts)).encode("utf-8"),
            "embeddings": buf.getvalue(),
            "chunks": json.dumps(texts, ensure_ascii=False).encode("utf-8"),
        }

    @staticmethod
    def _decode(
        course_id: str, h: Mapping[Union[bytes, str], bytes]
    ) -> CourseIndex:
        def _raw(key: str) -> Optional[bytes]:
            v = h.get(key.encode("utf-8"), h.get(key))
            if isinstance(v, str):
                return v.encode("utf-8")
            return v

        raw_chunks = _raw("chunks")
        raw_emb = _raw("embeddings")
        if raw_chunks is None or raw_emb is None:
            raise ValueError("incomplete snapshot")

        texts = json.loads(raw_chunks.decode("utf-8"))
        embeddings = np.load(io.BytesIO(raw_emb), allow_pickle=False).astype(
            np.float32, copy=False
        )
        if texts and embeddings.shape[0] != len(texts):
            raise ValueError("snapshot rows do not match chunks")
        return CourseIndex(
            course_id=course_id,
            chunks=[Chunk(content=t, courseId=course_id) for t in texts],
            embeddings=embeddings,
        )

    # ---------------- Open / save ----------------

    async def open(self, course_id: str) -> CourseIndex:
        """
        Load the persisted index for `course_id`, or an empty one if none exists.
        """
        try:
            r = await self._client()
            h = await r.hgetall(self._key(course_id))
        except (RedisError, OSError) as e:
            logger.error("index.open.error course=%s err=%s", course_id, type(e).__name__)
            raise StoreUnavailable() from e

        if not h:
            logger.info("index.open.new course=%s", course_id)
            return CourseIndex(course_id=course_id)

        try:
            index = self._decode(course_id, h)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error("index.open.corrupt course=%s err=%s", course_id, type(e).__name__)
            raise StoreUnavailable("index snapshot is unreadable") from e
        logger.info("index.open.loaded course=%s chunks=%d", course_id, len(index))
        return index

    async def save(self, index: CourseIndex) -> None:
        mapping = self._encode(index)
        try:
            r = await self._client()
            await r.hset(self._key(index.course_id), mapping=mapping)
        except (RedisError, OSError) as e:
            logger.error(
                "index.save.error course=%s err=%s", index.course_id, type(e).__name__
            )
            raise StoreUnavailable() from e
        logger.info("index.save course=%s chunks=%d", index.course_id, len(index))

