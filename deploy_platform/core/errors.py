# deploy_platform/core/errors.py

# -----------------------------
# Base Errors
# -----------------------------

class PlatformError(Exception):
    """Base class for all platform errors."""
    pass


# -----------------------------
# Validation / Domain Errors
# -----------------------------

class PlatformValidationError(PlatformError):
    """Invalid input or malformed request."""
    pass


class ConfigurationInvalid(PlatformValidationError):
    """Wizard configuration failed one or more field rules."""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__("Please fix the validation errors before deploying")


class EntityNotFound(PlatformError):
    """Referenced record does not exist."""
    pass


# -----------------------------
# Persistence Errors
# -----------------------------

class PersistenceError(PlatformError):
    pass


class DuplicateKeyError(PersistenceError):
    """Unique key (email, chain id) already taken."""
    pass


# -----------------------------
# Operational Errors
# -----------------------------

class ServiceControlError(PlatformError):
    """Process supervisor failed to stop or start a service."""
    pass
