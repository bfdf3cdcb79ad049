"""Utility for resolving wallet references to IDs."""

from walletcycle.domain.errors import NotFoundError, ValidationError
from walletcycle.domain.wallet import WalletService

MIN_ID_PREFIX = 4


def resolve_wallet(wallet_service: WalletService, wallet: str) -> str:
    """Resolve a wallet ID, ID prefix, name or phone number to a wallet ID.

    Args:
        wallet_service: WalletService instance
        wallet: Full ID, unique ID prefix (4+ characters), name or phone number

    Returns:
        Wallet ID

    Raises:
        NotFoundError: If no wallet matches
        ValidationError: If the reference matches more than one wallet
    """
    ref = wallet.strip()
    if wallet_service.get_wallet(ref) is not None:
        return ref

    wallets = wallet_service.list_wallets()

    by_name = [w for w in wallets if w.name.casefold() == ref.casefold()]
    if len(by_name) == 1:
        return by_name[0].id
    if len(by_name) > 1:
        raise ValidationError(f"More than one wallet is named '{ref}'; use its ID or phone number")

    by_phone = [w for w in wallets if w.phone_number == ref]
    if len(by_phone) == 1:
        return by_phone[0].id
    if len(by_phone) > 1:
        raise ValidationError(f"More than one wallet uses phone number {ref}; use its ID")

    if len(ref) >= MIN_ID_PREFIX:
        by_prefix = [w for w in wallets if w.id.startswith(ref)]
        if len(by_prefix) == 1:
            return by_prefix[0].id
        if len(by_prefix) > 1:
            raise ValidationError(f"Wallet ID prefix '{ref}' is ambiguous")

    raise NotFoundError(f"Wallet '{ref}' not found")
