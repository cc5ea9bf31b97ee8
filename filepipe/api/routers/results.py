from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from filepipe.api.dependencies import get_resolver
from filepipe.api.schemas import PendingResultResponse, ResultResponse
from filepipe.logging.logger import Log
from filepipe.resolver.exceptions import InvalidFileIdError
from filepipe.resolver.resolver import ResultResolver
from filepipe.results.exceptions import ResultRecordValidationError
from filepipe.storage.exceptions import StorageError

router = APIRouter(tags=["results"])

_NO_STORE = {"Cache-Control": "no-store"}


@router.get(
    "/result/{file_id}",
    response_model=ResultResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_202_ACCEPTED: {
            "model": PendingResultResponse,
            "description": "Analysis has not finished; poll again.",
        },
    },
)
def get_result(
    file_id: str,
    resolver: ResultResolver = Depends(get_resolver),
) -> JSONResponse:
    """Return 202 while the result is pending and 200 with the terminal record."""
    try:
        record = resolver.resolve(file_id)
    except InvalidFileIdError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except (ResultRecordValidationError, StorageError) as exc:
        Log.error(f"Failed to resolve result for {file_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to fetch result.",
        ) from exc

    if record is None:
        pending = PendingResultResponse(file_id=file_id)
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=pending.model_dump(by_alias=True),
            headers=_NO_STORE,
        )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=record.to_payload(),
        headers=_NO_STORE,
    )
