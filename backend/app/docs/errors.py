"""Error kinds raised by the document layer."""


class InvalidArgumentError(TypeError):
    """Input of the wrong type reached a store, chunker or assembler operation."""


class ExtractionError(ValueError):
    """An uploaded file did not yield usable text."""


def require_str(value: object, name: str) -> str:
    """Return value unchanged if it is a str, else raise InvalidArgumentError."""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{name} must be str, got {type(value).__name__}")
    return value
