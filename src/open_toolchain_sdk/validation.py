"""Checks operations run on their options before any I/O."""

from typing import Any

from open_toolchain_sdk.errors.exceptions import ValidationError


def validate_options(options: Any, name: str) -> None:
    """Reject missing options and options with required fields unset.

    Options classes list their required attribute names in ``REQUIRED``.

    Raises:
        ValidationError: ``options`` is None or a required field is None or empty.
    """
    if options is None:
        raise ValidationError(f"{name} cannot be None", field_name=name)
    for field_name in getattr(options, "REQUIRED", ()):
        validate_not_empty(getattr(options, field_name, None), field_name)


def validate_not_empty(value: Any, field_name: str) -> None:
    if value is None or value == "":
        raise ValidationError(f"{field_name} must be provided", field_name=field_name)
