# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "coursemind"

COURSES: Final[str] = f"{ROOT}:courses"
INDEXES: Final[str] = f"{COURSES}:index"  # per-course similarity index snapshot
DOCUMENTS: Final[str] = f"{COURSES}:documents"  # per-course document metadata list
