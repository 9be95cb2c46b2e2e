"""Error taxonomy for the recipe catalog.

Every error carries a human-readable ``message`` (safe to show the caller) and a
short machine ``code``. The API layer maps the base kinds to HTTP statuses.
"""


class CatalogError(Exception):
    code = "catalog_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Bad input. Raised before anything is written."""

    code = "invalid_input"


class UserNotFound(ValidationError):
    code = "user_not_found"


class InvalidTitle(ValidationError):
    code = "invalid_title"


class InvalidCategory(ValidationError):
    code = "invalid_category"


class InvalidDifficulty(ValidationError):
    code = "invalid_difficulty"


class InvalidDuration(ValidationError):
    code = "invalid_duration"


class InvalidInstructions(ValidationError):
    code = "invalid_instructions"


class IngredientListMismatch(ValidationError):
    code = "ingredient_list_mismatch"


class InvalidPageRequest(ValidationError):
    code = "invalid_page_request"


class InvalidName(ValidationError):
    code = "invalid_name"


class ConflictError(ValidationError):
    code = "conflict"


class DuplicateTitle(ConflictError):
    code = "duplicate_title"


class DuplicateUser(ConflictError):
    code = "duplicate_user"


class NotFoundError(CatalogError):
    code = "not_found"


class UnauthorizedError(CatalogError):
    code = "unauthorized"


class StorageError(CatalogError):
    code = "storage_error"


class BlobStoreError(StorageError):
    code = "blob_store_error"
