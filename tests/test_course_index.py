import asyncio

import numpy as np
import pytest

from core.course_index import add_chunks, retrieve
from core.entities import CourseIndex
from model.knowledge import Chunk
from repository.course_index_repository import CourseIndexRepository
from util.errors import StoreUnavailable

COURSE = "bio101"


def _chunks(*texts, course=COURSE):
    return [Chunk(content=t, courseId=course) for t in texts]


class TestIndexOps:
    def test_add_is_cumulative(self):
        index = CourseIndex(course_id=COURSE)
        assert add_chunks(index, _chunks("cells divide", "dna replicates")) == 2
        assert add_chunks(index, _chunks("proteins fold")) == 1

        assert [c.content for c in index.chunks] == [
            "cells divide",
            "dna replicates",
            "proteins fold",
        ]
        assert index.embeddings.shape[0] == 3

    def test_add_nothing(self):
        index = CourseIndex(course_id=COURSE)
        assert add_chunks(index, []) == 0
        assert len(index) == 0

    def test_retrieve_orders_by_similarity(self):
        index = CourseIndex(course_id=COURSE)
        add_chunks(
            index,
            _chunks(
                "mitochondria produce atp for the cell",
                "photosynthesis converts light energy into sugar",
                "the french revolution began in 1789",
            ),
        )

        hits = retrieve(index, "how does photosynthesis use light energy", k=2)

        assert hits[0].content.startswith("photosynthesis")
        assert len(hits) == 2

    def test_ties_keep_insertion_order(self):
        index = CourseIndex(course_id=COURSE)
        add_chunks(index, _chunks("alpha beta", "beta alpha", "gamma"))
        assert [c.content for c in retrieve(index, "alpha beta", k=2)] == [
            "alpha beta",
            "beta alpha",
        ]

        flipped = CourseIndex(course_id=COURSE)
        add_chunks(flipped, _chunks("beta alpha", "alpha beta", "gamma"))
        assert [c.content for c in retrieve(flipped, "alpha beta", k=2)] == [
            "beta alpha",
            "alpha beta",
        ]

    def test_retrieve_on_empty_index(self):
        assert retrieve(CourseIndex(course_id=COURSE), "anything", k=4) == []

    def test_k_larger_than_index(self):
        index = CourseIndex(course_id=COURSE)
        add_chunks(index, _chunks("one", "two"))
        assert len(retrieve(index, "one", k=4)) == 2


class TestCourseIndexRepository:
    def test_open_absent_course_is_empty(self, fake_redis):
        index = asyncio.run(CourseIndexRepository().open("new-course"))
        assert index.course_id == "new-course"
        assert len(index) == 0
        assert fake_redis.hset_calls == 0

    def test_save_open_round_trip(self, fake_redis):
        repo = CourseIndexRepository()
        index = CourseIndex(course_id=COURSE)
        add_chunks(
            index,
            _chunks(
                "enzymes lower activation energy",
                "ribosomes translate mrna into protein",
                "osmosis moves water across membranes",
                "enzymes are proteins",
            ),
        )
        before = retrieve(index, "what do enzymes do", k=3)

        asyncio.run(repo.save(index))
        loaded = asyncio.run(repo.open(COURSE))

        assert loaded.chunks == index.chunks
        assert np.array_equal(loaded.embeddings, index.embeddings)
        assert retrieve(loaded, "what do enzymes do", k=3) == before

    def test_save_replaces_snapshot_in_one_write(self, fake_redis):
        repo = CourseIndexRepository()
        index = CourseIndex(course_id=COURSE)
        add_chunks(index, _chunks("first"))
        asyncio.run(repo.save(index))
        add_chunks(index, _chunks("second"))
        asyncio.run(repo.save(index))

        assert fake_redis.hset_calls == 2
        loaded = asyncio.run(repo.open(COURSE))
        assert [c.content for c in loaded.chunks] == ["first", "second"]

    def test_redis_failure_is_store_unavailable(self, fake_redis):
        fake_redis.fail = True
        repo = CourseIndexRepository()
        with pytest.raises(StoreUnavailable) as err:
            asyncio.run(repo.open(COURSE))
        assert err.value.status_code == 503
        with pytest.raises(StoreUnavailable):
            asyncio.run(repo.save(CourseIndex(course_id=COURSE)))

    def test_corrupt_snapshot_is_store_unavailable(self, fake_redis):
        fake_redis.hashes[CourseIndexRepository._key(COURSE)] = {
            b"chunks": b"[not json",
            b"embeddings": b"nope",
        }
        with pytest.raises(StoreUnavailable):
            asyncio.run(CourseIndexRepository().open(COURSE))
