from __future__ import annotations

import re
from typing import Iterable, Optional

_WS_RE = re.compile(r"\s+")


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse any run of whitespace (newlines, tabs, NBSP...) to one space and trim."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def join_non_empty(values: Iterable[Optional[str]], sep: str = " ") -> str:
    return sep.join(v for v in values if v and v.strip())
