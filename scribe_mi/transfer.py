"""Integrity-checked file transfer through pre-signed storage URLs.

Upload: the base64 MD5 of the file is sent with the create-task request and
again as Content-MD5 on the storage PUT, so storage rejects a corrupted body
and the API can confirm the object it receives.

Download: the model is fetched straight from its pre-signed URL, the hex MD5
of the body is compared with the ETag, and only then is the body parsed.
"""

import httpx
from pydantic import ValidationError

from scribe_mi.checksum import md5_base64, md5_hex, normalize_etag
from scribe_mi.dispatcher import RequestDispatcher
from scribe_mi.exceptions import IntegrityError, ModelNotReadyError, ModelShapeMismatchError, UploadFailedError
from scribe_mi.logging import get_client_logger
from scribe_mi.schema import MODEL_SHAPES, MIFileType, MIModel, MITask, PostSubmitMIOutput, SubmitTaskRequest

logger = get_client_logger(__name__)


async def upload_file(
    dispatcher: RequestDispatcher,
    http: httpx.AsyncClient,
    file: bytes,
    filetype: MIFileType,
    filename: str | None = None,
    companyname: str | None = None,
) -> str:
    """Create a task for ``file`` and upload it to the returned storage URL.

    Returns:
        The job id of the new task. Server-side checksum confirmation is not
        awaited.

    Raises:
        UploadFailedError: The storage PUT did not return 200.
    """
    checksum = md5_base64(file)
    request = SubmitTaskRequest(
        filetype=filetype,
        filename=filename,
        companyname=companyname,
        md5checksum=checksum,
    )
    submitted = await dispatcher.call_endpoint(
        "/tasks",
        PostSubmitMIOutput,
        method="POST",
        json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
    )

    response = await http.put(submitted.url, content=file, headers={"Content-MD5": checksum})
    if response.status_code != 200:
        logger.error(f"Upload for job {submitted.jobid} rejected: {response.status_code} {response.reason_phrase}")
        raise UploadFailedError(response.status_code, response.reason_phrase)

    logger.info(f"Uploaded {len(file)} bytes for job {submitted.jobid}")
    return submitted.jobid


def parse_model(content: str | bytes) -> MIModel:
    """Validate a model body against each known shape, first match wins.

    Raises:
        ModelShapeMismatchError: No shape matched.
    """
    failures: list[ValidationError] = []
    for shape in MODEL_SHAPES:
        try:
            return shape.model_validate_json(content)
        except ValidationError as e:
            failures.append(e)

    for shape, failure in zip(MODEL_SHAPES, failures):
        logger.warning(f"Model validation failed as {shape.__name__}: {failure}")
    raise ModelShapeMismatchError() from failures[-1]


async def download_model(http: httpx.AsyncClient, task: MITask) -> MIModel:
    """Fetch, verify and parse the model of a finished task.

    Raises:
        ModelNotReadyError: The task has no model URL yet.
        httpx.HTTPStatusError: The storage GET failed.
        IntegrityError: The body does not match its ETag. Retry the fetch.
        ModelShapeMismatchError: The verified body is not a known model shape.
    """
    if not task.model_url:
        raise ModelNotReadyError(task.jobid)

    response = await http.get(task.model_url)
    response.raise_for_status()

    content = response.content
    declared = normalize_etag(response.headers.get("etag", ""))
    actual = md5_hex(content)
    if declared != actual:
        logger.error(f"Checksum mismatch for job {task.jobid} model: expected {declared or '<missing>'}, got {actual}")
        raise IntegrityError(declared, actual)

    logger.info(f"Verified model for job {task.jobid}")
    return parse_model(content)
