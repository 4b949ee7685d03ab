"""Validation utilities for Court Scheduler.

This module provides reusable validation functions with consistent error handling.
"""

# Court Scheduler
# Copyright (C) 2025  Court Scheduler developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Any, Optional, Sequence, Tuple

from courtscheduler.exceptions import InvalidConfigurationException


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


def _strict(result: ValidationResult) -> Any:
    if not result.is_valid:
        raise InvalidConfigurationException(result.error_message)
    return result.sanitized_value


# ========== Integer Validation ==========


def validate_positive_integer(
    value: Optional[int], field_name: str = "Value"
) -> ValidationResult:
    """Validate that a value is a positive integer.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with validation status
    """
    if value is None:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} is required",
        )

    if isinstance(value, bool):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be a number",
        )

    try:
        int_value = int(value)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be a number",
        )

    if int_value != value and not isinstance(value, str):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be a whole number: {value}",
        )
    if int_value <= 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be positive",
        )
    return ValidationResult(is_valid=True, sanitized_value=int_value)


def validate_positive_integer_strict(
    value: Optional[int], field_name: str = "Value"
) -> int:
    """Validate a positive integer and return it or raise.

    Raises:
        InvalidConfigurationException: If the value is not a positive integer
    """
    return _strict(validate_positive_integer(value, field_name))


# ========== Roster Validation ==========


def validate_participant_count(value: Optional[int]) -> ValidationResult:
    """Validate the roster size: an even integer of at least two."""
    result = validate_positive_integer(value, "Participant count")
    if not result:
        return result
    count = result.sanitized_value
    if count < 2 or count % 2 != 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Participant count must be an even number >= 2: {count}",
        )
    return ValidationResult(is_valid=True, sanitized_value=count)


def validate_participant_count_strict(value: Optional[int]) -> int:
    return _strict(validate_participant_count(value))


# ========== Court Group Validation ==========


def validate_court_group(
    members: Sequence[int], num_participants: int
) -> ValidationResult:
    """Validate the members of one court group.

    A group must be even-sized, hold at least two participants, contain
    only ids in ``[0, num_participants)`` and list nobody twice.

    Args:
        members: Ordered participant ids of the group
        num_participants: Roster size

    Returns:
        ValidationResult whose sanitized value is the members as a tuple
    """
    try:
        group = tuple(int(m) for m in members)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"Court group members must be integers: {members!r}",
        )

    if len(group) < 2 or len(group) % 2 != 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Court group must have an even size >= 2: {list(group)}",
        )

    out_of_range = [m for m in group if m < 0 or m >= num_participants]
    if out_of_range:
        return ValidationResult(
            is_valid=False,
            error_message=(
                f"Court group members {out_of_range} outside "
                f"[0, {num_participants})"
            ),
        )

    if len(set(group)) != len(group):
        return ValidationResult(
            is_valid=False,
            error_message=f"Court group lists a participant twice: {list(group)}",
        )

    return ValidationResult(is_valid=True, sanitized_value=group)


def validate_court_group_strict(
    members: Sequence[int], num_participants: int
) -> Tuple[int, ...]:
    return _strict(validate_court_group(members, num_participants))


def parse_group_spec(text: str) -> ValidationResult:
    """Parse a textual group such as ``"0,1,2,3"`` or ``"4-7"``.

    Comma separated items may themselves be inclusive ranges, so
    ``"0-1,8-9"`` yields ``(0, 1, 8, 9)``.
    """
    if not text or not text.strip():
        return ValidationResult(is_valid=False, error_message="Empty court group")

    members = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            if "-" in item:
                low, high = (int(part) for part in item.split("-", 1))
                if low > high:
                    return ValidationResult(
                        is_valid=False,
                        error_message=f"Range start exceeds end in '{item}'",
                    )
                members.extend(range(low, high + 1))
            else:
                members.append(int(item))
        except ValueError:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid court group item '{item}'",
            )

    return ValidationResult(is_valid=True, sanitized_value=tuple(members))
