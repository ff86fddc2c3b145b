"""Client error taxonomy.

Every error here is an expected, client-caused failure. The REST layer turns
them into a 422 response carrying ``code`` as the machine-readable reason;
anything else is treated as an unexpected server error.
"""


class ApiError(Exception):
    """Base client error."""

    def __init__(self, message: str, code: str = "api-error"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidPostIdError(ApiError):
    """Post ID does not look like a Ghost content ID."""

    def __init__(self, message: str = "Invalid post id"):
        super().__init__(message, "invalid-postid")


class NoSuchPostError(ApiError):
    """Post does not exist in Ghost."""

    def __init__(self, message: str = "No such post"):
        super().__init__(message, "no-such-post")


class InvalidCommentIdError(ApiError):
    """Comment ID is malformed."""

    def __init__(self, message: str = "Invalid comment id"):
        super().__init__(message, "invalid-commentid")


class NoSuchCommentError(ApiError):
    """Comment is absent or already deleted."""

    def __init__(self, message: str = "No such comment"):
        super().__init__(message, "no-such-comment")


class InvalidPasswordError(ApiError):
    """Password missing, malformed or mismatched."""

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message, "invalid-password")


class InvalidContentError(ApiError):
    """Comment content missing or not text."""

    def __init__(self, message: str = "Invalid content"):
        super().__init__(message, "invalid-content")


class InvalidAuthorError(ApiError):
    """Author name missing or not text."""

    def __init__(self, message: str = "Invalid author"):
        super().__init__(message, "invalid-author")


class TooManyCommentsError(ApiError):
    """Post reached its comment cap."""

    def __init__(self, message: str = "Too many comments"):
        super().__init__(message, "too-many-comments")


class InvalidBodyError(ApiError):
    """Request body is not a JSON object."""

    def __init__(self, message: str = "Invalid body"):
        super().__init__(message, "invalid-body")
