"""Configuration for the document store.

Defines all tunable parameters for the log-backed store.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class StoreConfig:
    """Configuration parameters for a document store.

    Attributes:
        path: Location of the log file
        full_text_fields: Record fields searched by ``$text`` queries
        id_field: Name of the unique record identifier field
        fsync_writes: Whether to fsync after every append and rewrite
        atomic_rewrite: Rewrite through a temp file and ``os.replace``
        create_if_missing: Create the log (and parent dirs) on open
        encoding: Text encoding of the log file
    """

    path: str
    full_text_fields: tuple[str, ...] = ()
    id_field: str = "id"
    fsync_writes: bool = True
    atomic_rewrite: bool = True
    create_if_missing: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        self.path = str(self.path)
        # A lone field name, not its characters
        if isinstance(self.full_text_fields, str):
            self.full_text_fields = (self.full_text_fields,)
        self.full_text_fields = tuple(self.full_text_fields)
