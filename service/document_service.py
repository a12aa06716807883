# service/document_service.py
import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Sequence, Tuple
from fastapi import UploadFile
from config.settings import settings
from core.entities import ProcessedBatch
from core.extractors import extract, resolve_file_type
from core.text import normalize, word_count
from model.document import ExtractedDocument, FailedDocument
from util.errors import ExtractionFailure, UnsupportedFormat
from util.functions import file_extension
import logging

logger = logging.getLogger(__name__)


def _write_fd(fd: int, data: bytes) -> None:
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


@asynccontextmanager
async def spooled_upload(file: UploadFile) -> AsyncIterator[str]:
    """
    Write an upload to a temporary file under UPLOAD_DIR and yield its path.
    The file is removed on exit, whether or not the body raised.
    """
    data = await file.read()
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    suffix = os.path.splitext(file.filename or "")[1].lower()
    fd, path = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=settings.UPLOAD_DIR)
    try:
        await asyncio.to_thread(_write_fd, fd, data)
        yield path
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


class DocumentService:
    """
    Turns uploaded files into ExtractedDocuments: extract per format, clean, count words.
    """

    async def process_file(self, path: str, original_name: str) -> ExtractedDocument:
        """
        Raises UnsupportedFormat before touching the file, ExtractionFailure on parse errors.
        """
        file_type = resolve_file_type(file_extension(original_name))
        raw = await asyncio.to_thread(extract, path, file_type.value)
        doc = ExtractedDocument(
            text=normalize(raw),
            wordCount=word_count(raw),
            fileName=original_name,
            fileType=file_type,
            processedAt=datetime.now(timezone.utc),
        )
        logger.info(
            "document.processed type=%s words=%d", file_type.value, doc.wordCount
        )
        return doc

    async def process_multiple_files(
        self, files: Sequence[Tuple[str, str]]
    ) -> ProcessedBatch:
        """
        Process (path, original_name) pairs in order. A file that fails is
        logged and left out; the rest of the batch carries on.
        """
        documents: List[ExtractedDocument] = []
        failures: List[FailedDocument] = []
        for path, name in files:
            try:
                documents.append(await self.process_file(path, name))
            except (UnsupportedFormat, ExtractionFailure) as e:
                logger.warning("document.failed ext=%s err=%s", file_extension(name), type(e).__name__)
                failures.append(FailedDocument(fileName=name, error=str(e.detail)))
        return ProcessedBatch(documents=documents, failures=failures)

    async def process_uploads(self, files: Sequence[UploadFile]) -> ProcessedBatch:
        """
        Spool each upload to disk, process it, and always remove the temp file.
        Unsupported extensions are rejected without writing anything.
        """
        documents: List[ExtractedDocument] = []
        failures: List[FailedDocument] = []
        for file in files:
            name = file.filename or "upload"
            try:
                resolve_file_type(file_extension(name))
                async with spooled_upload(file) as path:
                    batch = await self.process_multiple_files([(path, name)])
            except UnsupportedFormat as e:
                logger.warning("document.rejected ext=%s", file_extension(name))
                failures.append(FailedDocument(fileName=name, error=str(e.detail)))
                continue
            documents.extend(batch.documents)
            failures.extend(batch.failures)
        logger.info(
            "documents.batch ok=%d failed=%d", len(documents), len(failures)
        )
        return ProcessedBatch(documents=documents, failures=failures)
