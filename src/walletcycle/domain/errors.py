"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested wallet, transaction or notification does not exist."""


class PersistenceError(DomainError):
    """The underlying record store failed; the operation did not complete."""


class AdvisoryUnavailableError(DomainError):
    """The advisory collaborator is unreachable or answered with garbage."""


def wallet_not_found(wallet_id: str) -> str:
    """Return message for missing wallet."""
    return f"Wallet {wallet_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def notification_not_found(notification_id: str) -> str:
    """Return message for missing notification."""
    return f"Notification {notification_id} not found"


def over_limit(wallet_name: str, amount, remaining_limit) -> str:
    """Return message when an outgoing amount exceeds the remaining limit."""
    return (
        f"Amount {amount} exceeds the remaining monthly limit of wallet "
        f"'{wallet_name}' ({remaining_limit})"
    )


def wallet_delete_incomplete(wallet_id: str, removed_transactions: int) -> str:
    """Return message when transactions were removed but the wallet was not."""
    return (
        f"Removed {removed_transactions} transaction"
        f"{'s' if removed_transactions != 1 else ''} of wallet {wallet_id}, "
        "but the wallet itself could not be deleted. Retry the deletion."
    )
