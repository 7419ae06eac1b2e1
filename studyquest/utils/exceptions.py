"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from loguru import logger


class StudyQuestException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DataStoreError(StudyQuestException):
    """The relational store could not be read or written."""
    pass


class WagerError(StudyQuestException):
    """A wager was rejected; nothing was written."""

    code = "wager_rejected"
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientBalance(WagerError):
    """Stake exceeds the spendable balance."""

    code = "insufficient_balance"
    status_code = status.HTTP_409_CONFLICT


class OverTierLimit(WagerError):
    """Multiplier or stake exceeds what the account tier allows."""

    code = "over_tier_limit"
    status_code = status.HTTP_403_FORBIDDEN


class AlreadyGraded(WagerError):
    """The target item already carries a real grade."""

    code = "already_graded"
    status_code = status.HTTP_409_CONFLICT


class PastDue(WagerError):
    """The target item's due date has passed."""

    code = "past_due"
    status_code = status.HTTP_409_CONFLICT


class InvalidAmount(WagerError):
    """Stake is zero or negative."""

    code = "invalid_amount"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InvalidMultiplier(WagerError):
    """Multiplier is below 1.0x."""

    code = "invalid_multiplier"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ItemNotFound(WagerError):
    """The target item does not exist for this user."""

    code = "item_not_found"
    status_code = status.HTTP_404_NOT_FOUND


def handle_database_error(error: Exception) -> HTTPException:
    """Handle database errors and return appropriate HTTP response."""
    logger.error(f"Database error: {error}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Points store is unavailable. Please try again later.",
    )


def handle_wager_error(error: WagerError) -> HTTPException:
    """Translate a rejected wager into an HTTP error with a stable code."""
    logger.warning(f"Wager rejected ({error.code}): {error.message}")
    return HTTPException(
        status_code=error.status_code,
        detail={
            "code": error.code,
            "message": error.message,
            "details": error.details,
        },
    )
