"""
Signing identity helpers.

Wraps eth-account so the rest of the package deals in LocalAccount
objects and checksummed addresses.  Key storage is out of scope: the key
arrives through ``ChainConfig``.
"""

from __future__ import annotations

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_hash.auto import keccak

from .errors import ConfigError, ValidationError


def get_account(private_key: str) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: 0x-prefixed hex private key

    Returns:
        LocalAccount instance for signing transactions
    """
    try:
        return Account.from_key(private_key)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"PRIVATE_KEY is not a valid secp256k1 key: {exc}") from exc


def get_address(private_key: str) -> str:
    """Checksummed address for a private key."""
    return get_account(private_key).address


def is_address(value: str) -> bool:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) != 42:
        return False
    return all(c in "0123456789abcdefABCDEF" for c in value[2:])


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    if not is_address(address):
        raise ValidationError(f"Not a valid address: {address!r}")
    addr = address[2:].lower()
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result
