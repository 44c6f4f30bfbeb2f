"""
Domain errors raised by the catalog service.

Every business rule violation is a subclass of CatalogError so the API layer
can render them uniformly. Each class carries:
  - code: stable machine-readable identifier used in the error envelope
  - status: HTTP status the API maps it to
"""


class CatalogError(Exception):
    """Base class for all catalog rule violations."""

    code = "CATALOG_ERROR"
    status = 400
    default_message = "Catalog operation failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


# Uniqueness (409)

class DuplicateNameError(CatalogError):
    code = "DUPLICATE_NAME"
    status = 409
    default_message = "An entity with this name already exists."


class DuplicateTitleError(CatalogError):
    code = "DUPLICATE_TITLE"
    status = 409
    default_message = "A book with this title already exists."


class DuplicateIsbnError(CatalogError):
    code = "DUPLICATE_ISBN"
    status = 409
    default_message = "A book with this ISBN already exists."


class DuplicateTitleDateError(CatalogError):
    code = "DUPLICATE_TITLE_DATE"
    status = 409
    default_message = "A newspaper with this title and date already exists."


# Field validation (422)

class InvalidPriceError(CatalogError):
    code = "INVALID_PRICE"
    status = 422
    default_message = "Price is below the minimum allowed."


class InvalidStockError(CatalogError):
    code = "INVALID_STOCK"
    status = 422
    default_message = "Stock must be a whole number, not negative."


class InvalidPageCountError(CatalogError):
    code = "INVALID_PAGE_COUNT"
    status = 422
    default_message = "Page count is below the minimum allowed."


class EmptyIsbnError(CatalogError):
    code = "EMPTY_ISBN"
    status = 422
    default_message = "ISBN cannot be empty."


class InvalidIsbnFormatError(CatalogError):
    code = "INVALID_ISBN_FORMAT"
    status = 422
    default_message = "Invalid ISBN format. Use XXX-XX-XXX-XXXX-X."


class MissingAuthorsError(CatalogError):
    code = "MISSING_AUTHORS"
    status = 422
    default_message = "A book needs at least one author."


class MissingCategoryError(CatalogError):
    code = "MISSING_CATEGORY"
    status = 422
    default_message = "A book needs a category."


class UnknownReferenceError(CatalogError):
    code = "UNKNOWN_REFERENCE"
    status = 422
    default_message = "Referenced entity is not registered in this catalog."


# Stock adjustment

class InvalidQuantityError(CatalogError):
    code = "INVALID_QUANTITY"
    status = 422
    default_message = "Quantity must be a whole number greater than zero."


class InsufficientStockError(CatalogError):
    code = "INSUFFICIENT_STOCK"
    status = 409
    default_message = "Not enough stock to remove that quantity."


# Lookup

class NotFoundError(CatalogError):
    code = "NOT_FOUND"
    status = 404
    default_message = "Resource not found."


class StorageError(Exception):
    """Raised by storage engines when a collection cannot be read or written."""
