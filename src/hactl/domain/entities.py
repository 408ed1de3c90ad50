"""Entity identifier parsing.

Home Assistant addresses every entity as ``{domain}.{object_id}``.

INVARIANT: A parsed EntityReference is always lowercase and both
segments match ``[a-z0-9_]+``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from hactl.errors import ValidationError

ENTITY_ID_PATTERN = re.compile(r"[a-z0-9_]+\.[a-z0-9_]+")


@dataclass(frozen=True)
class EntityReference:
    """A validated ``{domain}.{object_id}`` pair."""

    domain: str
    object_id: str

    @property
    def entity_id(self) -> str:
        return f"{self.domain}.{self.object_id}"


def parse_entity_id(raw: object) -> EntityReference:
    """Trim, lowercase, and split *raw* into an :class:`EntityReference`.

    Examples:
        >>> parse_entity_id("Light.Kitchen")
        EntityReference(domain='light', object_id='kitchen')
    """
    normalized = ("" if raw is None else str(raw)).strip().lower()
    if not ENTITY_ID_PATTERN.fullmatch(normalized):
        msg = f"Invalid entity_id '{raw}'. Expected format: {{domain}}.{{object_id}}"
        raise ValidationError(msg, details={"entity_id": raw})
    domain, object_id = normalized.split(".")
    return EntityReference(domain=domain, object_id=object_id)


def entity_domain(entity_id: object) -> str:
    """Lowercased domain prefix of a hub-supplied entity id, or ``""``."""
    text = "" if entity_id is None else str(entity_id)
    head, sep, _ = text.partition(".")
    return head.lower() if sep else ""
