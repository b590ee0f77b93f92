"""Storefront exceptions."""


class StorefrontError(Exception):
    """Base class for storefront errors."""


class InvalidProductError(StorefrontError, ValueError):
    """Product has no usable identifier."""

    def __init__(self, message: str = "product must have an 'id' or '_id'"):
        super().__init__(message)


class InvalidQuantityError(StorefrontError, ValueError):
    """Requested quantity is not a positive integer."""

    def __init__(self, quantity, expected: str = "a positive integer"):
        self.quantity = quantity
        super().__init__(f"quantity must be {expected}, got {quantity!r}")


class EmptyCartError(StorefrontError, ValueError):
    """Checkout was attempted with nothing in the cart."""

    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class StorageError(StorefrontError):
    """Persistence backend failed to read or write a key."""

    def __init__(self, operation: str, key: str, cause: Exception | None = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        message = f"Storage {operation} failed for key {key!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
