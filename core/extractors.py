# core/extractors.py
import re
from typing import Callable, Dict, List
import fitz
import html2text
from docx import Document
from util.enums import FileType
from util.errors import ExtractionFailure, UnsupportedFormat
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


def extract_pdf(path: str) -> str:
    """
    Concatenate the text layer of every page, pages separated by a blank line.
    """
    try:
        pages: List[str] = []
        with fitz.open(path) as doc:
            with timed(logger, "extract.pdf", pages=doc.page_count):
                for i in range(doc.page_count):
                    pages.append(doc.load_page(i).get_text("text") or "")
        return "\n\n".join(pages)
    except Exception as e:
        # do not log payloads
        logger.error("extract.pdf.error err=%s", type(e).__name__)
        raise ExtractionFailure("unreadable PDF") from e


def extract_word(path: str) -> str:
    """
    Paragraph text of a Word document, one paragraph per line.
    Legacy binary .doc files are not OOXML packages and fail here.
    """
    try:
        with timed(logger, "extract.word"):
            document = Document(path)
            return "\n".join(p.text for p in document.paragraphs)
    except Exception as e:
        # corrupt packages surface as zip, lxml or KeyError depending on the part
        logger.error("extract.word.error err=%s", type(e).__name__)
        raise ExtractionFailure("unreadable Word document") from e


def _read_utf8(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except UnicodeDecodeError as e:
        logger.error("extract.decode.error")
        raise ExtractionFailure("file is not valid UTF-8") from e
    except OSError as e:
        logger.error("extract.read.error err=%s", type(e).__name__)
        raise ExtractionFailure("file could not be read") from e


def extract_text(path: str) -> str:
    return _read_utf8(path)


# Markdown that html2text emits around the text: table rules and <hr>,
# heading/bullet/quote markers at line start, and escapes.
_MD_RULE = re.compile(r"^[ \t]*(?:[|:\- ]*-{3,}[|:\- ]*|(?:\* ?){3,})[ \t]*$", re.M)
_MD_LINE_MARK = re.compile(r"^[ \t]*(?:#{1,6}|[*+-]|>+)[ \t]+", re.M)
_MD_ESCAPE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!>])")


def _html_converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.ignore_links = True
    converter.ignore_images = True
    converter.ignore_emphasis = True
    converter.body_width = 0  # No hard wrapping
    return converter


def extract_html(path: str) -> str:
    """
    Visible text of an HTML page. <head>, <script> and <style> are dropped;
    table cells and list items come out as separate words.
    """
    markup = _read_utf8(path)
    try:
        with timed(logger, "extract.html"):
            text = _html_converter().handle(markup)
    except Exception as e:
        logger.error("extract.html.error err=%s", type(e).__name__)
        raise ExtractionFailure("unparseable HTML") from e
    text = _MD_RULE.sub("", text)
    text = _MD_LINE_MARK.sub("", text)
    text = text.replace("|", " ")
    return _MD_ESCAPE.sub(r"\1", text)


EXTRACTORS: Dict[FileType, Callable[[str], str]] = {
    FileType.pdf: extract_pdf,
    FileType.docx: extract_word,
    FileType.doc: extract_word,
    FileType.txt: extract_text,
    FileType.html: extract_html,
}


def resolve_file_type(extension: str) -> FileType:
    ext = (extension or "").lower().lstrip(".")
    try:
        return FileType(ext)
    except ValueError:
        raise UnsupportedFormat(f".{ext}" if ext else "(none)") from None


def extract(path: str, extension: str) -> str:
    """
    Raw text of `path` using the adapter for `extension` (with or without the dot).
    Raises UnsupportedFormat or ExtractionFailure.
    """
    return EXTRACTORS[resolve_file_type(extension)](path)
