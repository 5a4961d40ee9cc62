from typing import Dict, List


class ServiceError(Exception):
    """Base class for failures reported back to the caller of a service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class AuthorizationError(ServiceError):
    pass


class ValidationError(ServiceError):
    """Input was rejected; ``errors`` maps a field key to its messages."""

    def __init__(self, errors: Dict[str, List[str]], message: str = "The given data was invalid."):
        super().__init__(message)
        self.errors = errors


class BookingValidationError(ValidationError):
    pass


class ErrorBag:
    """Collects field-keyed messages so every problem is reported at once."""

    def __init__(self):
        self.errors: Dict[str, List[str]] = {}

    def add(self, key: str, message: str):
        self.errors.setdefault(key, []).append(message)

    def __bool__(self):
        return bool(self.errors)

    def raise_if_any(self, exc_class=ValidationError):
        if self.errors:
            raise exc_class(self.errors)


REQUEST_LOCATIONS = ("body", "query", "path", "form", "header", "cookie")


def field_key(loc) -> str:
    """Turn a pydantic error location into a dotted key like ``booking_details.0.end``."""
    parts = list(loc)
    if parts and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def errors_from_pydantic(details) -> Dict[str, List[str]]:
    bag = ErrorBag()
    for detail in details:
        bag.add(field_key(detail["loc"]), detail["msg"])
    return bag.errors
