"""
Manifest entries written next to split patches.

One JSON object per line, one line per written patch file, in the order the
files were written.
"""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_serializer


class ManifestEntry(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
    )

    old_path: str
    new_path: str
    output_path: Path
    size_bytes: int
    written_at: datetime

    @field_serializer("output_path")
    def serialize_path(self, v: Path) -> str:
        return str(v)

    @field_serializer("written_at")
    def serialize_timestamp(self, v: datetime) -> str:
        return v.isoformat()
