"""Custom exceptions for the audio-transcriber service."""


class ConfigurationError(Exception):
    """Raised at startup when required settings are missing or invalid."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


class SecretResolutionError(Exception):
    """Raised when a secret cannot be read or parsed."""

    def __init__(self, secret_name: str, reason: str, cause: Exception | None = None):
        self.secret_name = secret_name
        self.reason = reason
        self.cause = cause
        super().__init__(f"Failed to resolve secret '{secret_name}': {reason}")


class PresignedURLError(Exception):
    """Raised when a time-limited read URL cannot be issued for an object."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        message = f"Failed to generate pre-signed URL for '{object_name}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StorageUploadError(Exception):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")


class StateStoreError(Exception):
    """Raised when a transcription record operation fails."""

    def __init__(
        self,
        file_identifier: str,
        operation: str,
        cause: Exception | None = None,
        message: str | None = None,
    ):
        self.file_identifier = file_identifier
        self.operation = operation
        self.cause = cause
        if message is None:
            message = f"State store {operation} failed for '{file_identifier}'"
            if cause is not None:
                message = f"{message}: {cause}"
        super().__init__(message)


class RecordNotFoundError(StateStoreError):
    """Raised when updating a transcription record that does not exist."""

    def __init__(self, file_identifier: str):
        super().__init__(
            file_identifier,
            "update",
            message=f"No transcription record for '{file_identifier}'",
        )


class RecordAlreadyExistsError(StateStoreError):
    """Raised when creating a transcription record whose identifier is taken."""

    def __init__(self, file_identifier: str, cause: Exception | None = None):
        super().__init__(
            file_identifier,
            "create",
            cause,
            message=f"Transcription record for '{file_identifier}' already exists",
        )


class TranscriptionError(Exception):
    """Raised when the external transcription service call fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)
