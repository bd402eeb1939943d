from typing import Optional


class BookwormError(Exception):
    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict:
        payload = {"success": False, "message": self.message}
        if self.error is not None:
            payload["error"] = self.error
        return payload


class InvalidInput(BookwormError):
    status_code = 400


class StoreFailure(BookwormError):
    """A read or aggregation against the catalog store failed."""

    status_code = 500
