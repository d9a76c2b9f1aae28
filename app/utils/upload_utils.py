# app/utils/upload_utils.py
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from uuid import uuid4

from app.core.error_messages import ErrorMessages
from app.core.errors import InvalidArgument

# Raster formats only; SVG can carry script and is served from the public dir.
ALLOWED_IMAGE_SUBTYPES = frozenset({"png", "jpeg", "jpg", "gif", "webp"})


@dataclass(frozen=True)
class UploadConfig:
    """Limits and locations for avatar uploads."""

    server_url: str
    public_dir: str = "public"
    profiles_subdir: str = "img/profiles"
    max_file_size: int = 1024 * 1024 * 5

    @property
    def profiles_dir(self) -> Path:
        return Path(self.public_dir) / self.profiles_subdir

    def public_uri(self, path: Path) -> str:
        """Build the served URI for a file stored under ``public_dir``."""
        relative = Path(path).relative_to(self.public_dir).as_posix()
        return f"{self.server_url.rstrip('/')}/{relative}"


def subtype_from_content_type(content_type: Optional[str]) -> str:
    # "image/png" -> "png"
    if not content_type or "/" not in content_type:
        raise InvalidArgument(ErrorMessages.AVATAR_BAD_TYPE)
    main_type, subtype = content_type.split(";", 1)[0].strip().lower().split("/", 1)
    if main_type != "image" or subtype not in ALLOWED_IMAGE_SUBTYPES:
        raise InvalidArgument(ErrorMessages.AVATAR_BAD_TYPE)
    return subtype


def build_avatar_filename(subtype: str, *, now: Optional[float] = None) -> str:
    """Return ``profile-<uuid4>-<epoch millis>.<subtype>``.

    The uuid keeps names apart across processes uploading in the same
    millisecond. No I/O happens here.
    """
    millis = int((time.time() if now is None else now) * 1000)
    return f"profile-{uuid4()}-{millis}.{subtype}"
