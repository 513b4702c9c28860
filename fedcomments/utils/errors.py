"""Custom exception hierarchy for the comment analysis API.

All application exceptions inherit from :class:`FedCommentsError`, which
carries an optional ``source_name`` so error handlers can tell which backing
resource (e.g. "sqlite", "config") caused the failure, and a class-level
``status_code`` that the error-handling middleware uses for the HTTP
response.

    FedCommentsError  (base -- 500)
    +-- StorageError          (connection or query failure -- 500)
    +-- CommentNotFoundError  (single-resource lookup miss -- 404)
    +-- ExportTooLargeError   (export row ceiling exceeded -- 400)
    +-- ConfigurationError    (invalid or missing configuration -- 500)

Soft faults (malformed JSON blobs, absent optional tables) never raise; they
are logged and replaced with empty values where they occur.
"""


class FedCommentsError(Exception):
    """Base exception for all API errors.

    The ``__str__`` method prefixes the source name in brackets for log
    scanning, e.g. ``[sqlite] unable to open database file``.  The bare
    ``message`` is what reaches the client.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        source_name: str | None = None,
    ) -> None:
        self._message = message
        self._source_name = source_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def source_name(self) -> str | None:
        return self._source_name

    def __str__(self) -> str:
        if self._source_name:
            return f"[{self._source_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Storage errors
# ---------------------------------------------------------------------------

class StorageError(FedCommentsError):
    """Raised when the SQLite store cannot be opened or a query fails."""

    status_code = 500

    def __init__(
        self,
        message: str = "Database operation failed",
        source_name: str | None = "sqlite",
    ) -> None:
        super().__init__(message=message, source_name=source_name)


# ---------------------------------------------------------------------------
# Request-level errors
# ---------------------------------------------------------------------------

class CommentNotFoundError(FedCommentsError):
    """Raised when a single-comment lookup finds no condensed analysis."""

    status_code = 404

    def __init__(
        self,
        message: str = "Comment not found",
        comment_id: str | None = None,
    ) -> None:
        self.comment_id = comment_id
        super().__init__(message=message)


class ExportTooLargeError(FedCommentsError):
    """Raised when a full export would exceed the configured row ceiling.

    ``total_comments`` is the true number of eligible rows, returned to the
    client so it can switch to the paginated listing.
    """

    status_code = 400

    def __init__(
        self,
        total_comments: int,
        message: str = "Dataset too large for direct export. Use pagination or contact admin.",
    ) -> None:
        self.total_comments = total_comments
        super().__init__(message=message)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(FedCommentsError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        source_name: str | None = "config",
    ) -> None:
        super().__init__(message=message, source_name=source_name)
