# recipe_catalog/routers/uploads.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from recipe_catalog import config
from recipe_catalog.errors import BadRequestError
from recipe_catalog.schemas import ApiResponse, UploadedFile
from recipe_catalog.services.upload_service import ObjectStorage, get_storage, upload_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=ApiResponse[UploadedFile], status_code=status.HTTP_201_CREATED)
async def upload(
    file: Optional[UploadFile] = File(None),
    kind: str = Query("category", alias="type"),
    storage: ObjectStorage = Depends(get_storage),
):
    logger.info("Upload request received for file: %s", file.filename if file else None)
    if file is None:
        raise BadRequestError("No file provided")

    # capped at limit + 1 bytes; upload_file rejects anything longer than the limit
    content = await file.read(config.MAX_UPLOAD_BYTES + 1)
    data = await asyncio.to_thread(upload_file, storage, file.filename, content, file.content_type, kind)
    return {"message": "File uploaded successfully", "data": data}
