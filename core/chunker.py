# core/chunker.py
from typing import List, Sequence

DOCUMENT_SEPARATOR = "\n\n"

# Preferred cut points, strongest first.
_BOUNDARIES = ("\n\n", "\n", ". ", "? ", "! ", " ")


def _cut_point(text: str, end: int, floor: int) -> int:
    """
    Position just past the strongest boundary found in text[floor:end],
    or `end` itself (hard cut) when there is none.
    """
    for sep in _BOUNDARIES:
        i = text.rfind(sep, floor, end)
        if i != -1:
            return i + len(sep)
    return end


def chunk_texts(
    texts: Sequence[str], target_size: int = 1000, overlap: int = 200
) -> List[str]:
    """
    Join `texts` with a blank line and cut into windows of at most `target_size`
    characters. Each window after the first starts exactly `overlap` characters
    before the previous one ended, so dropping that prefix from every later
    window and concatenating gives back the joined text.
    """
    if target_size <= 0:
        raise ValueError("target_size must be positive")
    if overlap < 0 or overlap >= target_size:
        raise ValueError("overlap must be in [0, target_size)")

    joined = DOCUMENT_SEPARATOR.join(t for t in texts if t and t.strip())
    if not joined.strip():
        return []

    # Don't accept a boundary that would leave a window under half size.
    min_advance = max(overlap, target_size // 2)
    length = len(joined)
    out: List[str] = []
    start = 0
    while True:
        end = min(start + target_size, length)
        if end < length:
            end = _cut_point(joined, end, start + min_advance)
        out.append(joined[start:end])
        if end >= length:
            return out
        start = end - overlap


def merge_windows(chunks: Sequence[str], overlap: int) -> str:
    """
    Inverse of chunk_texts over a run of stored windows. A window that opens
    with the previous window's last `overlap` characters continues it and
    loses that prefix; any other window starts a new upload and is joined
    with DOCUMENT_SEPARATOR. With no overlap every window is treated that way.
    """
    if not chunks:
        return ""
    parts: List[str] = [chunks[0]]
    prev = chunks[0]
    for chunk in chunks[1:]:
        if overlap and len(prev) >= overlap and chunk[:overlap] == prev[-overlap:]:
            parts.append(chunk[overlap:])
        else:
            parts.append(DOCUMENT_SEPARATOR + chunk)
        prev = chunk
    return "".join(parts)
