"""
Utility functions for schema validation.
"""
from typing import List, Optional, Union


def normalize_tags(v: Optional[Union[str, List[str]]]) -> List[str]:
    """
    Normalize tags to a list of unique, trimmed, lowercase strings.
    Accepts either a list or the comma-separated form stored on the flashcard row.

    Args:
        v: Tags as a list, a comma-separated string, or None

    Returns:
        List of tags in first-seen order
    """
    if v is None:
        return []
    raw = v.split(",") if isinstance(v, str) else v

    tags: List[str] = []
    for tag in raw:
        tag = tag.strip().lower()
        if not tag:
            continue
        if "," in tag:
            raise ValueError(f"tags cannot contain commas. Got: {tag}")
        if tag not in tags:
            tags.append(tag)
    return tags


def join_tags(tags: List[str]) -> str:
    """Serialize a normalized tag list for storage."""
    return ",".join(tags)
