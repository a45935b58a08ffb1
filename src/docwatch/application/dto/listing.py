"""Document store listing DTO."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ListedFile:
    """One file from a flattened folder listing."""

    external_id: str
    name: str
    mime_type: str
    modified_time: str
    native_checksum: str | None = None
