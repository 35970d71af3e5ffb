"""Stable identifiers for documentation items.

UIDs are derived from document content only (base URL, title, version, tag
names, operation ids), never from an item's position, so re-reading the same
document always yields the same identifiers.

* :func:`derive_root_uid` / :func:`derive_uid` -- slash-joined UIDs.
* :func:`derive_html_id` -- anchor-safe form of any identifier.
* :func:`derive_tag_html_id` -- tag anchors, honouring a bookmark extension.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

_NON_WORD = re.compile(r"\W")

TAG_SEGMENT = "tag"
BOOKMARK_EXTENSION = "x-bookmark-id"


def derive_uid(*segments: Optional[str]) -> str:
    """Join UID segments with ``/``.

    Each segment has leading and trailing ``/`` stripped; ``None`` and
    empty segments (including ones that were only slashes) are dropped.

    Example::

        >>> derive_uid("https://example.com/api/", "tag", "pets")
        'https://example.com/api/tag/pets'
    """
    trimmed = (segment.strip("/") for segment in segments if segment)
    return "/".join(segment for segment in trimmed if segment)


def derive_root_uid(base_url: Optional[str], title: Optional[str], version: Optional[str]) -> str:
    """UID of the API itself, from its first server URL, title and version."""
    return derive_uid(base_url, title, version)


def derive_html_id(value: Optional[str]) -> Optional[str]:
    """Replace every non-word character with ``_``.

    Returns ``None`` for ``None`` or an empty string. Idempotent.
    """
    if not value:
        return None
    return _NON_WORD.sub("_", value)


def derive_tag_html_id(
    name: str,
    extensions: Mapping[str, Any],
    bookmark_key: str = BOOKMARK_EXTENSION,
) -> Optional[str]:
    """Anchor of a tag: the bookmark extension verbatim if set, else its sanitised name."""
    bookmark = extensions.get(bookmark_key)
    if isinstance(bookmark, str) and bookmark:
        return bookmark
    return derive_html_id(name)
