class BackendUnavailable(Exception):
    """No candidate backend answered the health probe."""


class ApiError(Exception):
    """The backend answered with an error status."""

    def __init__(self, status: int, message: str, code: str = ''):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.code = code
