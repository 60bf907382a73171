"""Change events delivered by the task/report change source.

The change source hands over plain document mappings; handlers convert them
to snapshot models, so these events carry raw data only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DocumentCreated:
    """A document was created; ``data`` is its full snapshot."""

    document_id: str
    data: dict[str, Any] | None = field(default=None)


@dataclass(frozen=True)
class DocumentUpdated:
    """A document was updated; ``before``/``after`` are full snapshots."""

    document_id: str
    before: dict[str, Any] | None = field(default=None)
    after: dict[str, Any] | None = field(default=None)
