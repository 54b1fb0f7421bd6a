# resolve360/utils/file_upload.py
import os
import uuid

from .errors import ImageValidationError

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

def image_extension(content_type: str) -> str:
    if content_type not in EXTENSIONS:
        raise ImageValidationError(f"Unsupported file type: {content_type}")
    return EXTENSIONS[content_type]

def save_issue_image(data: bytes, content_type: str, upload_dir: str) -> str:
    """Write an issue photo under upload_dir and return its public path"""
    ext = image_extension(content_type)
    filename = f"issue_{uuid.uuid4().hex}.{ext}"
    os.makedirs(upload_dir, exist_ok=True)
    filepath = os.path.join(upload_dir, filename)

    with open(filepath, "wb") as f:
        f.write(data)

    return f"/uploads/{filename}"
