from typing import Optional

from fastapi import APIRouter, File, UploadFile, status
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import AppException
from app.core.storage import check_upload_size, save_quotation_file

router = APIRouter()


class UploadResponse(BaseModel):
    path: str


@router.post(
    "/quotations",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload quotation file",
    description="Store a quotation document and return the path to save on the client record.",
    tags=["uploads"],
)
async def upload_quotation(file: Optional[UploadFile] = File(None)):
    if file is None or not file.filename:
        AppException().raise_400("No file provided")
    check_upload_size(file.size)
    # Never buffer more than one byte past the limit
    content = await file.read(settings.UPLOAD_MAX_BYTES + 1)
    path = save_quotation_file(content, file.filename, file.content_type)
    return UploadResponse(path=path)
