"""Error types raised across the bookstore service."""


class BookstoreError(Exception):
    """Base class for all bookstore errors."""


class ConfigError(BookstoreError):
    """A configuration value or secret bundle has an unusable shape."""


class AuthBootstrapError(BookstoreError):
    """Logging in to the secret store failed."""


class SecretFetchError(BookstoreError):
    """Reading or merging the secret bundle failed."""


class DataAccessError(BookstoreError):
    """A database query, scan or statement failed."""


class NotFoundError(DataAccessError):
    """No row matched a point lookup."""
