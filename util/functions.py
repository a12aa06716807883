# util/functions.py
import os


def clip_words(text: str, max_words: int = 100) -> str:
    """
    - Trim 'text' to at most `max_words` tokens separated by whitespace.
    - Adds an ellipsis when trimming occurs.
    """
    words = text.split()
    if len(words) <= max_words:
        return text
    return " ".join(words[:max_words]) + " …"


def file_extension(file_name: str) -> str:
    """Lower-cased extension without the dot ("Notes.PDF" -> "pdf")."""
    return os.path.splitext(file_name or "")[1].lower().lstrip(".")


def strip_code_fences(raw: str) -> str:
    # Models sometimes wrap JSON in ```json ... ``` despite instructions
    raw = (raw or "").strip()
    if raw.startswith("```"):
        raw = raw.strip("`")
        if raw.startswith("json"):
            raw = raw[4:]
        raw = raw.strip()
    return raw
