"""Exception hierarchy for the Scribe MI client.

All exceptions inherit from ScribeMIError. Response schema failures are not
wrapped: pydantic's ValidationError reaches the caller unchanged.
"""


class ScribeMIError(Exception):
    """Base exception for all Scribe MI client errors."""


class NotAuthenticatedError(ScribeMIError):
    """Raised when an operation needs a session that was never established."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class UnsupportedChallengeError(ScribeMIError):
    """Raised when the identity provider answers with an interactive challenge."""

    def __init__(self, challenge_name: str):
        self.challenge_name = challenge_name
        super().__init__(f"Unsupported authentication challenge: {challenge_name}")


class ApiError(ScribeMIError):
    """Raised for a non-200 response carrying a well-formed error body."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status} {message}")


class UnknownApiError(ScribeMIError):
    """Raised for a non-200 response whose body is not a recognised error."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"Unknown error ({status})")


class UploadFailedError(ScribeMIError):
    """Raised when the pre-signed storage PUT is rejected."""

    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason
        super().__init__(f"Failed to upload file: {status} {reason}")


class ModelNotReadyError(ScribeMIError):
    """Raised when a task has no model URL to download from."""

    def __init__(self, jobid: str):
        self.jobid = jobid
        super().__init__(f"Cannot load model for task {jobid}: model is not ready to export")


class IntegrityError(ScribeMIError):
    """Raised when downloaded content does not match its declared checksum."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Checksum mismatch: expected {expected or '<missing>'}, got {actual}")


class ModelShapeMismatchError(ScribeMIError):
    """Raised when a downloaded model matches none of the known model shapes."""

    def __init__(self, message: str = "Model does not match expected format"):
        super().__init__(message)
