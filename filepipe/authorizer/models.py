from dataclasses import dataclass

from filepipe.storage.models import WriteCapability
from filepipe.submissions.models import Submission


@dataclass(frozen=True)
class UploadAuthorization:
    """What the client receives: where to upload and how to ask for the result."""

    upload_url: str
    file_id: str
    submission: Submission
    capability: WriteCapability
