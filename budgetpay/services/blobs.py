import uuid
from pathlib import Path

from ..errors import ValidationError

MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MB
ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class BlobStore:
    """Directory-backed byte store. ``put`` returns a stable URL path."""

    url_prefix = "/uploads"

    def __init__(self, root):
        self.root = Path(root)

    def ensure(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def put(self, data: bytes, content_type: str) -> str:
        ext = ALLOWED_CONTENT_TYPES.get((content_type or "").lower())
        if ext is None:
            raise ValidationError("File type not allowed")
        if len(data) == 0:
            raise ValidationError("Empty file")
        if len(data) > MAX_UPLOAD_BYTES:
            raise ValidationError("File too large (max 5MB)")

        filename = f"{uuid.uuid4().hex}{ext}"
        with open(self.ensure() / filename, "wb") as f:
            f.write(data)
        return f"{self.url_prefix}/{filename}"
