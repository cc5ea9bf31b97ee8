from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from filepipe.api.dependencies import get_settings, get_store, get_worker
from filepipe.api.schemas import StoredObjectResponse
from filepipe.config.settings import Settings
from filepipe.logging.logger import Log
from filepipe.storage.base import BaseObjectStore
from filepipe.storage.exceptions import (
    ContentTypeMismatchError,
    ExpiredCapabilityError,
    InvalidCapabilityError,
    InvalidObjectKeyError,
    ObjectTooLargeError,
    StorageError,
)
from filepipe.worker.worker import AnalysisWorker

router = APIRouter(tags=["objects"])


@router.put("/objects/{token}", response_model=StoredObjectResponse)
async def put_object(
    token: str,
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    store: BaseObjectStore = Depends(get_store),
    worker: AnalysisWorker = Depends(get_worker),
) -> StoredObjectResponse:
    """Store a raw upload authorized by a capability token, then trigger analysis."""
    body = await request.body()
    content_type = request.headers.get("content-type", "")
    try:
        key = await run_in_threadpool(
            store.put_with_capability,
            token,
            body,
            content_type,
            settings.max_object_bytes,
        )
    except (InvalidCapabilityError, ExpiredCapabilityError, InvalidObjectKeyError) as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ContentTypeMismatchError as exc:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(exc),
        ) from exc
    except ObjectTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(exc),
        ) from exc
    except StorageError as exc:
        Log.error(f"Failed to store upload: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to store upload.",
        ) from exc

    Log.info(f"Stored {len(body)} bytes at {key}")
    background_tasks.add_task(worker.handle, key)
    return StoredObjectResponse(key=key)
