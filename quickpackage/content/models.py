from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

TOKEN_SCHEME = "content"


# ----------------------------------------------------------------------
# Content reference
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ContentReference:
    """
    Pointer to one (item, language, version) in a named content database.

    `path` is captured for readability and archive layout; it is not part
    of the identity and is left out of the token form.
    """

    database: str
    item_id: str
    language: str
    version: int
    path: str = field(default="", compare=False)

    def to_token(self) -> str:
        """
        Canonical string form:
            content://master/<item_id>?lang=en&ver=1
        """
        query = urlencode({"lang": self.language, "ver": str(self.version)})
        return (
            f"{TOKEN_SCHEME}://{quote(self.database, safe='')}"
            f"/{quote(self.item_id, safe='')}?{query}"
        )

    @classmethod
    def from_token(cls, token: str) -> "ContentReference":
        parts = urlsplit(token)
        if parts.scheme != TOKEN_SCHEME or not parts.netloc:
            raise ValueError(f"Not a content reference token: {token!r}")

        item_id = unquote(parts.path.lstrip("/"))
        if not item_id:
            raise ValueError(f"Content reference token has no item id: {token!r}")

        params = parse_qs(parts.query)
        try:
            language = params["lang"][0]
            version = int(params["ver"][0])
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"Malformed content reference token: {token!r}") from exc

        return cls(
            database=unquote(parts.netloc),
            item_id=item_id,
            language=language,
            version=version,
        )

    def __str__(self) -> str:
        return self.to_token()


# ----------------------------------------------------------------------
# Item
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Item:
    """
    One language version of a node in the content tree, as read from
    storage. `version` is 0 when the item has no version in `language`.
    """

    database: str
    item_id: str
    name: str
    path: str
    language: str
    version: int
    parent_id: Optional[str] = None
    template: Optional[str] = None
    sort_order: int = 0
    fields: Dict[str, object] = field(default_factory=dict, compare=False)

    @property
    def reference(self) -> ContentReference:
        return ContentReference(
            database=self.database,
            item_id=self.item_id,
            language=self.language,
            version=self.version,
            path=self.path,
        )


__all__ = [
    "ContentReference",
    "Item",
    "TOKEN_SCHEME",
]
