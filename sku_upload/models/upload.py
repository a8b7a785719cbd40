from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

"""UploadedFile model: the file source handed to the workflow.

An upload either carries its content directly (bytes or text, e.g. from a
web form) or points at a path that is read lazily when the run reaches its
Reading state.
"""

__all__ = [
    "CSV_MEDIA_TYPE",
    "FileReadError",
    "UploadedFile",
]

CSV_MEDIA_TYPE = "text/csv"
_UTF8_BOM = "\ufeff"


class FileReadError(Exception):
    """Raised when the upload content cannot be read or decoded."""


@dataclass(frozen=True)
class UploadedFile:
    name: str
    media_type: str | None = None
    content: bytes | str | None = None
    path: Path | None = None

    @staticmethod
    def from_path(path: Path, media_type: str | None = None) -> UploadedFile:
        """Create an upload for a local file, guessing the media type from its name."""
        if media_type is None:
            media_type, _ = mimetypes.guess_type(path.name)
        return UploadedFile(name=path.name, media_type=media_type, path=path)

    @property
    def is_csv(self) -> bool:
        # 宣言タイプか拡張子のどちらかが CSV なら受け付ける
        return self.media_type == CSV_MEDIA_TYPE or self.name.lower().endswith(".csv")

    def read_text(self) -> str:
        """Return the decoded content with any UTF-8 BOM removed.

        Raises:
            FileReadError: If the file cannot be read or is not valid UTF-8
        """
        raw = self.content
        if raw is None:
            if self.path is None:
                raise FileReadError(f"no content for upload '{self.name}'")
            try:
                raw = self.path.read_bytes()
            except OSError as e:
                raise FileReadError(f"cannot read {self.path}: {e}") from e
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FileReadError(f"'{self.name}' is not valid UTF-8: {e}") from e
        if raw.startswith(_UTF8_BOM):
            raw = raw[1:]
        return raw
