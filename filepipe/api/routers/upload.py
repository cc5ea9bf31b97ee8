from fastapi import APIRouter, Depends, HTTPException, status

from filepipe.api.dependencies import get_authorizer
from filepipe.api.schemas import UploadRequest, UploadResponse
from filepipe.authorizer.authorizer import UploadAuthorizer
from filepipe.authorizer.exceptions import (
    AuthorizationFailedError,
    InvalidUploadRequestError,
)

router = APIRouter(tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
def request_upload(
    payload: UploadRequest,
    authorizer: UploadAuthorizer = Depends(get_authorizer),
) -> UploadResponse:
    """Issue an upload URL and file id for one new submission."""
    try:
        authorization = authorizer.authorize(payload.file_name, payload.content_type)
    except InvalidUploadRequestError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AuthorizationFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to issue upload URL.",
        ) from exc

    return UploadResponse(upload_url=authorization.upload_url, file_id=authorization.file_id)
