"""Immutable snapshot of a company's status vocabulary.

Order statuses are configured per company, so the set of legal states is
only known at runtime.  ``StatusRegistry`` is loaded once per operation
and every status name coming from a caller is validated against it.  Two
names carry workflow meaning and must exist verbatim in every registry:
``READY_FOR_PRODUCTION`` (payment confirmed) and ``DELIVERED`` (settled).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from modules.statuses.exceptions import (
    EmptyStatusRegistry,
    MissingRequiredStatus,
    StatusNotFound,
)

READY_FOR_PRODUCTION = "Ready for Production"
DELIVERED = "Delivered"
REQUIRED_STATUS_NAMES: tuple[str, ...] = (READY_FOR_PRODUCTION, DELIVERED)

DEFAULT_STATUSES: tuple[tuple[str, str], ...] = (
    ("New", "#3b82f6"),
    ("Design Approval", "#a855f7"),
    (READY_FOR_PRODUCTION, "#f59e0b"),
    ("In Production", "#f97316"),
    ("Shipping", "#06b6d4"),
    (DELIVERED, "#22c55e"),
)

BLACK = "#000000"
WHITE = "#ffffff"
LIGHT_BACKGROUND_THRESHOLD = 0.70

_HEX_COLOR = re.compile(r"#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


def contrast_color(hex_color: Optional[str]) -> str:
    """Text color for a badge drawn on *hex_color*.

    Luminance is ``(0.299 R + 0.587 G + 0.114 B) / 255``.  Only backgrounds
    brighter than 0.70 get black text; everything else, including
    malformed input, gets white.
    """
    if not isinstance(hex_color, str):
        return WHITE
    match = _HEX_COLOR.fullmatch(hex_color)
    if match is None:
        return WHITE
    red, green, blue = (int(part, 16) for part in match.groups())
    luminance = (0.299 * red + 0.587 * green + 0.114 * blue) / 255
    return BLACK if luminance > LIGHT_BACKGROUND_THRESHOLD else WHITE


def is_valid_color(value: str) -> bool:
    return isinstance(value, str) and _HEX_COLOR.fullmatch(value) is not None


@dataclass(frozen=True)
class StatusEntry:
    name: str
    sort_order: int
    color: str

    @property
    def text_color(self) -> str:
        return contrast_color(self.color)


@dataclass(frozen=True)
class StatusRegistry:
    """Ordered status vocabulary of one company."""

    entries: tuple[StatusEntry, ...]

    @classmethod
    def from_statuses(cls, statuses: Iterable) -> StatusRegistry:
        entries = sorted(
            (StatusEntry(s.name, s.sort_order, s.color) for s in statuses),
            key=lambda entry: (entry.sort_order, entry.name),
        )
        return cls(tuple(entries))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.entries)

    @property
    def initial(self) -> str:
        if not self.entries:
            raise EmptyStatusRegistry("No order statuses are configured.")
        return self.entries[0].name

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.entries)

    def resolve(self, name: str) -> str:
        """Return *name* if it is a legal status, else raise ``StatusNotFound``."""
        if name not in self:
            raise StatusNotFound(f"Status '{name}' does not exist.")
        return name

    def require(self, name: str) -> str:
        """Return a load-bearing status name, failing loudly when absent."""
        if name not in self:
            raise MissingRequiredStatus(
                f"Required status '{name}' is missing from the status list."
            )
        return name

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_STATUS_NAMES if name not in self]
