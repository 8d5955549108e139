"""Tool argument validation against advertised input schemas."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from ..errors import MappingError
from .definitions import DEFINITIONS_BY_NAME


@lru_cache(maxsize=None)
def _validator(tool: str) -> Draft7Validator:
    schema = DEFINITIONS_BY_NAME[tool]["inputSchema"]
    Draft7Validator.check_schema(schema)
    return Draft7Validator(schema)


def _argument_name(error: ValidationError) -> str | None:
    if error.path:
        return ".".join(str(p) for p in error.path)
    if error.validator == "required" and isinstance(error.message, str):
        # "'url' is a required property"
        head = error.message.split(" ", 1)[0]
        return head.strip("'\"") or None
    return None


def validate_arguments(tool: str, arguments: Any) -> dict[str, Any]:
    """Validate a raw argument bag and return it as a plain dict.

    Raises MappingError on the first violation (errors ordered by argument path
    so the reported one is stable across runs).
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise MappingError(
            f"Invalid arguments for {tool}: expected an object, got {type(arguments).__name__}",
            tool=tool,
        )

    errors = sorted(_validator(tool).iter_errors(arguments), key=lambda e: [str(p) for p in e.path])
    if errors:
        first = errors[0]
        argument = _argument_name(first)
        where = f" (argument '{argument}')" if argument and first.path else ""
        raise MappingError(
            f"Invalid arguments for {tool}{where}: {first.message}",
            tool=tool,
            argument=argument,
            details={"violations": len(errors)},
        )
    return dict(arguments)


__all__ = ["validate_arguments"]
