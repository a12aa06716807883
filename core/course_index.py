# core/course_index.py
from typing import List, Sequence
import numpy as np
from core.embeddings import embed_query, embed_texts
from core.entities import CourseIndex
from model.knowledge import Chunk
from util.errors import StoreUnavailable
import logging

logger = logging.getLogger(__name__)


def add_chunks(index: CourseIndex, chunks: Sequence[Chunk]) -> int:
    """
    Embed `chunks` and append them after whatever the index already holds.
    Returns how many were added.
    """
    if not chunks:
        return 0
    vecs = embed_texts([c.content for c in chunks])
    if len(index) == 0:
        index.embeddings = vecs
    else:
        if vecs.shape[1] != index.dimension:
            logger.error(
                "index.add.dim_mismatch course=%s have=%d got=%d",
                index.course_id,
                index.dimension,
                vecs.shape[1],
            )
            raise StoreUnavailable("embedding dimension changed")
        index.embeddings = np.vstack([index.embeddings, vecs])
    index.chunks.extend(chunks)
    logger.info(
        "index.add course=%s added=%d total=%d", index.course_id, len(chunks), len(index)
    )
    return len(chunks)


def retrieve(index: CourseIndex, query: str, k: int = 4) -> List[Chunk]:
    """
    Top-k chunks by cosine similarity, best first; equal scores keep insertion order.
    """
    if len(index) == 0 or k <= 0:
        return []
    q = embed_query(query)
    sims = index.embeddings @ q
    order = np.argsort(-sims, kind="stable")[:k]
    logger.info("index.retrieve course=%s k=%d hits=%d", index.course_id, k, len(order))
    return [index.chunks[int(i)] for i in order]
