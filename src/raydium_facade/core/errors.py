"""Exception types shared across the facade."""


class FacadeError(Exception):
    """Base exception for facade errors."""


class ConfigurationError(FacadeError):
    """Raised when a collaborator (connection, owner) is used before being set."""


EMPTY_CONNECTION = "connection not set, call set_connection() first"
EMPTY_OWNER = "owner not set, call set_owner() first"
