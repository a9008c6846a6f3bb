"""Domain errors raised by the services and translated to HTTP responses in main."""


class ToolsHubError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ToolsHubError, ValueError):
    status_code = 400


class InvalidIdentifierError(ToolsHubError):
    status_code = 400


class UnauthorizedError(ToolsHubError):
    status_code = 401


class NotFoundError(ToolsHubError):
    status_code = 404


class ConflictError(ToolsHubError):
    status_code = 409


class CapacityError(ToolsHubError):
    """Raised when no free short code could be found."""

    status_code = 503
