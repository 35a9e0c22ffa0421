class BabelError(Exception):
    """Base error; `message` is safe to show to the user."""

    status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BabelError, ValueError):
    status = 400


class UnsupportedContentError(BabelError):
    status = 415


class CollaboratorError(BabelError):
    status = 500
