"""
errors.py — AppError base class and error code registry.

Every error returned by the evenup API uses a code defined here.
Do not raise strings or generic exceptions from service or route code.

Rules:
  - Error codes are a versioned contract. They do not change once published.
  - Error messages are human-readable prose. They may be improved at any time.
  - The split calculator raises these too: a rejected split is surfaced to
    the caller as a rejected save with a readable reason, never silently
    accepted.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "code":    self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return {"error": payload}

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


# ── Error Code Registry ────────────────────────────────────────────────────
#
# Organised by category. HTTP status is indicated in the comment.
# These are the string values sent in the API response.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD              = "MISSING_FIELD"
    INVALID_FIELD              = "INVALID_FIELD"
    INVALID_AMOUNT             = "INVALID_AMOUNT"
    INVALID_AMOUNT_PRECISION   = "INVALID_AMOUNT_PRECISION"
    INVALID_CATEGORY           = "INVALID_CATEGORY"
    INVALID_SPLIT_TYPE         = "INVALID_SPLIT_TYPE"
    INVALID_CURRENCY           = "INVALID_CURRENCY"
    INVALID_FILTER             = "INVALID_FILTER"
    EMPTY_PARTICIPANTS         = "EMPTY_PARTICIPANTS"
    DUPLICATE_SPLIT_USER       = "DUPLICATE_SPLIT_USER"

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    DUPLICATE_FRIEND           = "DUPLICATE_FRIEND"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    PERSON_NOT_FOUND           = "PERSON_NOT_FOUND"
    GROUP_NOT_FOUND            = "GROUP_NOT_FOUND"

    # ── Business Rule Violations (422) ────────────────────────────────────
    SPLIT_SUM_MISMATCH         = "SPLIT_SUM_MISMATCH"      # exact amounts != total
    SPLIT_PERCENT_MISMATCH     = "SPLIT_PERCENT_MISMATCH"  # percentages != 100
    INVALID_SHARE_WEIGHTS      = "INVALID_SHARE_WEIGHTS"   # sum(weights) <= 0
    UNKNOWN_PARTICIPANT        = "UNKNOWN_PARTICIPANT"
    NO_GROUP_MEMBERS           = "NO_GROUP_MEMBERS"
    SELF_SETTLEMENT            = "SELF_SETTLEMENT"
    SETTLEMENT_EXCEEDS_BALANCE = "SETTLEMENT_EXCEEDS_BALANCE"

    # ── System Errors (500) ────────────────────────────────────────────────
    INTERNAL_ERROR             = "INTERNAL_ERROR"
