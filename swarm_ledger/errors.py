"""Error taxonomy shared by the ledger core and the HTTP layer.

Every failure a ledger operation can report is a ``LedgerError`` subclass.
Each kind carries the HTTP status the router answers with, so the transport
only has to install a single exception handler.

Design intent:
    - Authentication and pubkey validation fail before any transaction opens.
    - Domain outcomes (not enough funds, nothing to raid) are raised from the
      pure domain layer and abort the surrounding transaction.
    - Infrastructure failures are wrapped in ``StoreError`` together with the
      operation that failed; the cause is logged but never shown to clients.
"""

from __future__ import annotations

from dataclasses import dataclass


class LedgerError(Exception):
    """Base exception for every ledger failure."""

    status_code: int = 500


class AuthenticationError(LedgerError):
    """Missing, malformed or invalid request signature."""

    status_code = 401


class ValidationError(LedgerError):
    """Malformed public key or an out-of-range request quantity."""

    status_code = 400


class NotFoundError(LedgerError):
    """No record exists for the pubkey, or the target has nothing to take."""

    status_code = 404


class ConflictError(LedgerError):
    """Airdrop requested for a pubkey that already owns an account."""

    status_code = 403


class InsufficientFundsError(LedgerError):
    """The operation would drive a balance negative (or the account is missing)."""

    status_code = 403


@dataclass(slots=True)
class StoreOperationContext:
    """Structured operation metadata carried by ``StoreError``.

    Attributes:
        operation: Stable operation identifier (for example ``"ledger.stake"``).
        details: Optional human-readable context for logs.
    """

    operation: str
    details: str | None = None


class StoreError(LedgerError):
    """Underlying storage failure, passed through opaquely.

    Args:
        context: Structured operation metadata.
        cause: Optional underlying exception.
    """

    status_code = 500

    def __init__(
        self,
        *,
        context: StoreOperationContext,
        cause: Exception | None = None,
    ) -> None:
        message = context.operation
        if context.details:
            message = f"{message}: {context.details}"
        super().__init__(message)
        self.context = context
        self.cause = cause
