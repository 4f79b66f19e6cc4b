# backend/utils/storage.py
import logging
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from utils.errors import InvalidInput

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
UPLOADS_URL_PREFIX = "/uploads/"


# Copy an uploaded file to disk, refusing anything larger than max_bytes
def save_upload(upload: UploadFile, target: Path, max_bytes: int) -> int:
    target.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    try:
        with open(target, "wb") as buffer:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise InvalidInput(f"File is too large (limit {max_bytes // (1024 * 1024)} MB)")
                buffer.write(chunk)
    except Exception:
        remove_file(target)
        raise
    finally:
        upload.file.close()
    return written


# Delete a stored file. Failure is logged and reported, never raised.
def remove_file(path: Path) -> bool:
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.error("Could not delete file %s: %s", path, e)
        return False
    logger.info("Deleted file %s", path)
    return True


# Map a public /uploads/... URL path back to a file under upload_root
def url_to_path(upload_root: Path, url_path: Optional[str]) -> Optional[Path]:
    if not url_path or not url_path.startswith(UPLOADS_URL_PREFIX):
        return None
    root = upload_root.resolve()
    candidate = (root / url_path[len(UPLOADS_URL_PREFIX):]).resolve()
    if root not in candidate.parents:
        return None
    return candidate


def path_to_url(upload_root: Path, path: Path) -> str:
    return UPLOADS_URL_PREFIX + path.relative_to(upload_root).as_posix()
