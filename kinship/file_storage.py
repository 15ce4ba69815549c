"""
Friend photo storage
Uploaded photos are normalized to a bounded JPEG on local disk and served from PUBLIC_PREFIX
"""

import io
import os
import uuid
import aiofiles
from fastapi import UploadFile, HTTPException
from PIL import Image, ImageOps, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool
import logging

logger = logging.getLogger(__name__)

UPLOAD_DIR = os.getenv('UPLOAD_DIR', 'static/friend_photos')
PUBLIC_PREFIX = '/static/friend_photos'

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
MAX_IMPORT_FILE_SIZE = 10 * 1024 * 1024  # screenshots and group photos
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}
MAX_IMAGE_SIZE = (1024, 1024)
JPEG_QUALITY = 85


def normalize_photo(content: bytes) -> bytes:
    """Decode, apply EXIF rotation, bound to MAX_IMAGE_SIZE and re-encode as RGB JPEG"""
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.load()
            photo = ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise HTTPException(400, "Invalid image file")

    if photo.mode != 'RGB':
        photo = photo.convert('RGB')
    photo.thumbnail(MAX_IMAGE_SIZE, Image.Resampling.LANCZOS)

    out = io.BytesIO()
    photo.save(out, format='JPEG', quality=JPEG_QUALITY, optimize=True)
    return out.getvalue()


class FileStorageManager:
    """Reads uploads and keeps friend photos on local disk"""

    def __init__(self, root: str = UPLOAD_DIR, public_prefix: str = PUBLIC_PREFIX):
        self.root = root
        self.public_prefix = public_prefix

    def path_for(self, filename: str) -> str:
        return os.path.join(self.root, filename)

    def url_for(self, filename: str) -> str:
        return f"{self.public_prefix}/{filename}"

    def filename_from_url(self, url: str):
        """Stored filename behind a public URL, or None for URLs stored elsewhere"""
        if not url or not url.startswith(self.public_prefix + '/'):
            return None
        name = url[len(self.public_prefix) + 1:]
        if not name or '/' in name or name.startswith('.'):
            return None
        return name

    @staticmethod
    async def read_upload(file: UploadFile, max_size: int = MAX_IMPORT_FILE_SIZE) -> bytes:
        """Read an uploaded file, enforcing a size limit"""
        content = await file.read()
        if not content:
            raise HTTPException(400, "Uploaded file is empty")
        if len(content) > max_size:
            raise HTTPException(400, f"File too large. Max size is {max_size // (1024 * 1024)}MB")
        return content

    async def save_friend_photo(self, friend_id: int, file: UploadFile) -> str:
        """Store an uploaded photo for friend_id and return its public URL"""
        ext = os.path.splitext(file.filename or '')[1].lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise HTTPException(400, f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

        content = await self.read_upload(file, MAX_FILE_SIZE)
        jpeg = await run_in_threadpool(normalize_photo, content)

        filename = f"friend_{friend_id}_{uuid.uuid4().hex[:12]}.jpg"
        path = self.path_for(filename)
        os.makedirs(self.root, exist_ok=True)
        try:
            async with aiofiles.open(path, 'wb') as f:
                await f.write(jpeg)
        except OSError as e:
            logger.error(f"Could not write {path}: {e}")
            if os.path.exists(path):
                os.remove(path)
            raise HTTPException(500, "Error saving file")

        logger.info(f"Stored photo for friend {friend_id} at {path}")
        return self.url_for(filename)

    async def delete_friend_photo(self, photo_url: str) -> bool:
        """Remove a locally stored photo; external or data URLs are left alone"""
        filename = self.filename_from_url(photo_url)
        if not filename:
            return False
        path = self.path_for(filename)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not delete {path}: {e}")
            return False
        return True


file_storage = FileStorageManager()
