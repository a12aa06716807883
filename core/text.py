# core/text.py
import re

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def normalize(raw: str) -> str:
    """
    Whitespace runs inside a paragraph become one space; paragraphs are
    separated by exactly one blank line; the result is trimmed.
    """
    paragraphs = (" ".join(p.split()) for p in _PARAGRAPH_BREAK.split(raw or ""))
    return "\n\n".join(p for p in paragraphs if p)


def word_count(text: str) -> int:
    # Counted on raw extractor output so legacy counts are preserved.
    return len((text or "").split())
