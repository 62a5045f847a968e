import re
from typing import List


def normalize_token(s: str) -> str:
    if not s: return ""
    t = re.sub(r"[^a-z0-9\s\-]", "", str(s).lower()).strip()
    t = re.sub(r"\s+", " ", t)
    return t


def slugify(s: str) -> str:
    t = normalize_token(s)
    return re.sub(r"[\s\-]+", "-", t).strip("-")


def parse_id_list(raw: str | None) -> List[str]:
    """Split a comma separated id string, trimming tokens and dropping empties and repeats."""
    seen: dict[str, None] = {}
    for token in (raw or "").split(","):
        token = token.strip()
        if token:
            seen.setdefault(token, None)
    return list(seen)
