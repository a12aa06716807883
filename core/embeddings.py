# core/embeddings.py
from functools import lru_cache
from typing import Sequence
import numpy as np
from sentence_transformers import SentenceTransformer
from config.settings import settings
from util.errors import StoreUnavailable
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _load_model() -> SentenceTransformer:
    """
    Lazy-load the sentence embedding model.

    Model is kept CPU-friendly; adjust in settings if you want a larger model.
    """
    name = settings.EMBEDDING_MODEL_NAME
    with timed(logger, "embed.model.load", model=name):
        model = SentenceTransformer(name, device="cpu")
    return model


def embed_texts(texts: Sequence[str], batch_size: int = 0) -> np.ndarray:
    """
    Encode `texts` into an (n, d) float32 matrix of L2-normalized rows.
    Provider failures surface as StoreUnavailable.
    """
    batch_size = batch_size or settings.EMBEDDING_BATCH_SIZE
    try:
        model = _load_model()
        with timed(logger, "embed.encode", n=len(texts), batch=batch_size):
            vecs = model.encode(
                list(texts),
                batch_size=batch_size,
                convert_to_numpy=True,
                normalize_embeddings=True,
            )
    except (OSError, RuntimeError, ValueError) as e:
        logger.error("embed.encode.error err=%s", type(e).__name__)
        raise StoreUnavailable("embedding provider failed") from e
    vecs = np.asarray(vecs, dtype=np.float32)
    if vecs.ndim == 1:
        vecs = vecs.reshape(1, -1)
    return vecs


def embed_query(query: str) -> np.ndarray:
    return embed_texts([query])[0]
