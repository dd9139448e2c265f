"""Photo upload endpoints."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as FormFile

from bocado.api.deps import get_current_user
from bocado.core.exceptions import Forbidden, InvalidReviewData, PhotoUploadFailed
from bocado.models.user import User
from bocado.schemas.photo import PhotoUploadResponse, SinglePhotoUploadResponse
from bocado.services.photos import PhotoFile, PhotoService, get_photo_service

router = APIRouter(prefix="/photos", tags=["photos"])

# multipart field names sent by the clients, first non-empty one wins
PHOTO_FIELDS = ("photos", "photos[]", "files")


async def _to_photo_file(upload: FormFile, index: int) -> PhotoFile:
    return PhotoFile(
        filename=upload.filename or f"photo-{index}",
        content_type=upload.content_type or "",
        data=await upload.read(),
    )


@router.post("", response_model=PhotoUploadResponse)
async def upload_photos(
    request: Request,
    review_id: str = Form(...),
    user: User = Depends(get_current_user),
    service: PhotoService = Depends(get_photo_service),
) -> PhotoUploadResponse:
    """Upload review photos; per-file failures are reported next to the stored URLs."""
    form = await request.form()
    uploads: list[FormFile] = []
    for name in PHOTO_FIELDS:
        uploads = [item for item in form.getlist(name) if isinstance(item, FormFile)]
        if uploads:
            break
    if not uploads:
        raise InvalidReviewData("No photos were provided")

    files = [await _to_photo_file(upload, index) for index, upload in enumerate(uploads)]
    result = await run_in_threadpool(service.upload_review_photos, user.id, review_id, files)
    return PhotoUploadResponse(
        success=result.success,
        uploaded_urls=result.uploaded_urls,
        errors=[error.message for error in result.errors],
        message=f"{len(result.uploaded_urls)} de {len(files)} fotos subidas",
    )


@router.post("/single", response_model=SinglePhotoUploadResponse)
async def upload_single_photo(
    photo: UploadFile = File(...),
    temp_review_id: str = Form(..., alias="tempReviewId"),
    index: int = Form(0, ge=0),
    user: User = Depends(get_current_user),
    service: PhotoService = Depends(get_photo_service),
) -> SinglePhotoUploadResponse:
    """Upload one photo ahead of the review; the client collects the URLs."""
    photo_file = await _to_photo_file(photo, index)
    try:
        service.validate(photo_file)
    except PhotoUploadFailed as exc:
        raise InvalidReviewData(exc.message, exc.details) from exc

    url = await run_in_threadpool(service.upload_photo, user.id, temp_review_id, photo_file, index)
    return SinglePhotoUploadResponse(
        url=url,
        file_name=service.storage.key_from_url(url),
        original_name=photo_file.filename,
        size=len(photo_file.data),
    )


@router.delete("")
def delete_photo(
    url: str,
    user: User = Depends(get_current_user),
    service: PhotoService = Depends(get_photo_service),
) -> dict[str, bool]:
    if not service.owns_photo(user.id, url):
        raise Forbidden("You cannot delete this photo")
    return {"success": service.delete_photo(url)}
