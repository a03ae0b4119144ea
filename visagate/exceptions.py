"""
Client-facing request errors.

Each carries the HTTP status and the ``message``/``error`` pair rendered into
the JSON error envelope.
"""

from fastapi import status


class ApiError(Exception):
    """Base exception for errors reported straight back to the caller"""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, error: str):
        self.message = message
        self.error = error
        super().__init__(message)

    def to_response(self) -> dict:
        return {"success": False, "message": self.message, "error": self.error}


class MethodNotAllowedError(ApiError):
    """Wrong HTTP verb"""

    status_code = status.HTTP_405_METHOD_NOT_ALLOWED

    def __init__(self):
        super().__init__("Method not allowed. Use POST.", "Method not allowed")


class MissingFieldsError(ApiError):
    """countryCode or nationality absent"""

    def __init__(self):
        super().__init__(
            "Missing required fields: countryCode, nationality",
            "Missing required fields",
        )


class InvalidTypesError(ApiError):
    """countryCode or nationality not a string"""

    def __init__(self):
        super().__init__(
            "Invalid input types. countryCode and nationality must be strings.",
            "Invalid input types",
        )


class InvalidFormatError(ApiError):
    """countryCode or nationality not two characters long"""

    def __init__(self):
        super().__init__(
            "countryCode and nationality must be 2-character country codes.",
            "Invalid country code format",
        )
