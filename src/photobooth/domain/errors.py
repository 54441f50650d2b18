"""Error taxonomy shared by services and the HTTP layer."""


class PhotoboothError(Exception):
    """Base error carrying an HTTP status and a client-safe message."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(PhotoboothError):
    """A required setting is absent or invalid."""

    default_message = "Server configuration error"


class MissingConfigurationError(ConfigurationError):
    """A secret needed by the current request is not configured."""


class ValidationError(PhotoboothError):
    """Client-correctable request problem."""

    status_code = 400
    default_message = "Invalid request"


class MethodNotAllowedError(ValidationError):
    status_code = 405
    default_message = "Method not allowed"


class InvalidContentTypeError(ValidationError):
    default_message = "Expected multipart/form-data for upload"


class InvalidMimeTypeError(ValidationError):
    default_message = "Only JPEG, PNG, and WebP images are allowed"


class FileTooLargeError(ValidationError):
    default_message = "File too large"


class NoFileProvidedError(ValidationError):
    default_message = "No file uploaded"


class MalformedUploadError(ValidationError):
    default_message = "Error processing upload"


class AuthError(PhotoboothError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenPathError(PhotoboothError):
    status_code = 403
    default_message = "Invalid file path"


class NotFoundError(PhotoboothError):
    status_code = 404
    default_message = "Photo not found"


class UpstreamError(PhotoboothError):
    """Blob or metadata store call failed."""

    default_message = "Upstream service error"


class BlobWriteFailedError(UpstreamError):
    default_message = "Error uploading photo"


class MetadataWriteFailedError(UpstreamError):
    default_message = "Error uploading photo"


class QueryTimeoutError(PhotoboothError):
    status_code = 504
    default_message = "Database query timeout"
