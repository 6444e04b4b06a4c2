"""Validation utilities for Rally Pairing.

This module provides reusable validation functions with consistent error handling.
"""

from typing import Any, Optional

from rallypairing.exceptions import InvalidPlayerDataException, InvalidResultException


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


def _is_whole_number(value: Any) -> bool:
    # bool is an int subclass but never a valid score or rating
    return isinstance(value, int) and not isinstance(value, bool)


# ========== Score Validation ==========


def validate_score(score: Any, label: str = "Score") -> ValidationResult:
    """Validate a single match score.

    Scores must be non-negative integers. There is no upper bound: the score
    cap only scales rating movement and never rejects a result.

    Args:
        score: Value to validate
        label: Name used in the error message

    Returns:
        ValidationResult with validation status

    Example:
        >>> validate_score(21).sanitized_value
        21
        >>> bool(validate_score(-1))
        False
    """
    if score is None:
        return ValidationResult(is_valid=False, error_message=f"{label} is required")
    if not _is_whole_number(score):
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} must be an integer, got {score!r}",
        )
    if score < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"{label} cannot be negative: {score}",
        )
    return ValidationResult(is_valid=True, sanitized_value=score)


def validate_score_strict(score: Any, label: str = "Score") -> int:
    """Validate a score and raise exception if invalid.

    Args:
        score: Value to validate
        label: Name used in the error message

    Returns:
        The validated score

    Raises:
        InvalidResultException: If score is invalid
    """
    result = validate_score(score, label)
    if not result.is_valid:
        raise InvalidResultException(result.error_message)
    return result.sanitized_value


# ========== Player Validation ==========


def validate_rating(rating: Any) -> ValidationResult:
    """Validate a player rating. Ratings are always whole numbers."""
    if not _is_whole_number(rating):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be an integer, got {rating!r}",
        )
    return ValidationResult(is_valid=True, sanitized_value=rating)


def validate_seed(seed: Any) -> ValidationResult:
    """Validate a seed position (1 = strongest)."""
    if not _is_whole_number(seed) or seed < 1:
        return ValidationResult(
            is_valid=False,
            error_message=f"Seed must be a positive integer, got {seed!r}",
        )
    return ValidationResult(is_valid=True, sanitized_value=seed)


def validate_player_fields_strict(rating: Any, seed: Any) -> None:
    """Validate rating and seed together.

    Raises:
        InvalidPlayerDataException: If either value is invalid
    """
    for result in (validate_rating(rating), validate_seed(seed)):
        if not result.is_valid:
            raise InvalidPlayerDataException(result.error_message)
