import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


async def read_upload(upload: Optional[UploadFile], max_size_bytes: int) -> Optional[bytes]:
    """
    Read an uploaded recording in chunks, enforcing the size limit.

    Returns ``None`` when no file was uploaded. The upload is closed whether
    the read succeeded or was rejected.
    """
    if upload is None:
        return None

    buffer = bytearray()
    try:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            if len(buffer) + len(chunk) > max_size_bytes:
                raise HTTPException(
                    status_code=413,
                    detail=f"Audio file is too large. Max size is {max_size_bytes} bytes.",
                )
            buffer.extend(chunk)
    finally:
        await upload.close()

    logger.info(f"Read audio upload '{upload.filename}' ({len(buffer)} bytes, {upload.content_type})")
    return bytes(buffer)
