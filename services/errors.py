class FrontDeskError(Exception):
    """Base for errors reported back to the caller as a rejected operation."""

    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(FrontDeskError):
    status_code = 400


class NotFoundError(FrontDeskError):
    status_code = 404


class ConflictError(FrontDeskError):
    status_code = 409


class StorageError(FrontDeskError):
    status_code = 500
