# core/entities.py
from dataclasses import dataclass, field
from typing import List
import numpy as np
from model.document import ExtractedDocument, FailedDocument
from model.knowledge import Chunk


def _empty_matrix() -> np.ndarray:
    return np.zeros((0, 0), dtype=np.float32)


@dataclass
class CourseIndex:
    """
    Similarity index for one course: chunk i is embedded at row i of
    `embeddings` (L2-normalized, float32), in insertion order.
    """

    course_id: str
    chunks: List[Chunk] = field(default_factory=list)
    embeddings: np.ndarray = field(default_factory=_empty_matrix)  # (n, d)

    def __len__(self) -> int:
        return len(self.chunks)

    @property
    def dimension(self) -> int:
        return int(self.embeddings.shape[1]) if self.embeddings.ndim == 2 else 0


@dataclass
class ProcessedBatch:
    documents: List[ExtractedDocument]
    failures: List[FailedDocument]
