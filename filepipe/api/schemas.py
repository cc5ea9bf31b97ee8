"""Request and response schemas for the HTTP surface."""

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    content_type: str = Field(..., alias="contentType")


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(..., alias="uploadURL")
    file_id: str = Field(..., alias="fileId")


class StoredObjectResponse(BaseModel):
    key: str


class PendingResultResponse(BaseModel):
    """Body of a 202 response: the result is not ready yet, poll again."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(..., alias="fileId")
    ready: bool = False


class ResultResponse(BaseModel):
    """Body of a 200 response: the terminal result record."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(..., alias="fileId")
    status: str
    file_type: str | None = Field(default=None, alias="fileType")
    columns: list[str] | None = None
    row_count: int | None = Field(default=None, alias="rowCount", ge=0)
    line_count: int | None = Field(default=None, alias="lineCount", ge=0)
    error: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
