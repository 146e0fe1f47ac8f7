"""Protocol definition for read pipeline operators."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from ..core.types import Record


class PipelineOperator(Protocol):
    """One stage of the read pipeline (filter, sort or project)."""

    arr: Sequence[Record]

    def get(self) -> list[Record]:
        """Apply the stage and return a new list; ``arr`` is left untouched."""
        ...
