# Copyright (c) 2025 Marcus Dillavou <line72@line72.net>
# Part of the Genreshelf Project
# Released under the AGPLv3 or later

# Errors raised by the genre store. Each one knows the HTTP status
# and JSON body it turns into.


class GenreError(Exception):
    """Base class for every error the store raises on purpose."""

    status = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class GenreValidationError(GenreError):
    """One or more fields failed validation. `errors` holds every rule that failed."""

    status = 400

    def __init__(self, errors: list[str], message: str = "Validation failed"):
        self.errors = list(errors)
        super().__init__(message)

    def to_dict(self) -> dict:
        return {**super().to_dict(), "errors": self.errors}


class BadRequest(GenreError):
    status = 400


class GenreNotFound(GenreError):
    status = 404

    def __init__(self, genre_id=None, message: str = "Genre not found"):
        self.genre_id = genre_id
        super().__init__(message)


class GenreConflict(GenreError):
    status = 409

    def __init__(self, name: str, message: str = "Genre with this name already exists"):
        self.name = name
        super().__init__(message)
