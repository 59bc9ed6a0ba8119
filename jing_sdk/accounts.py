"""Deterministic Stacks account derivation from a BIP-39 mnemonic.

Accounts live at ``m/44'/5757'/0'/0/<index>``. A wallet is expanded one
account at a time, so deriving account ``n`` builds accounts ``0..n`` in
order. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from eth_account.hdaccount import key_from_seed, seed_from_mnemonic
from eth_keys import keys
from eth_utils import ValidationError as MnemonicValidationError

from .chain.c32 import c32_address
from .chain.interfaces import Account, AccountDeriver
from .chain.network import NetworkType, get_network
from .chain.transactions import COMPRESSED_KEY_SUFFIX
from .chain.utils import hash160
from .errors import InvalidParameterError

logger = logging.getLogger(__name__)

STACKS_DERIVATION_PATH = "m/44'/5757'/0'/0/{index}"


@dataclass(frozen=True)
class WalletAccount:
    index: int
    stx_private_key: str

    def __repr__(self) -> str:
        return f"WalletAccount(index={self.index}, stx_private_key=<redacted>)"


@dataclass
class Wallet:
    """Seed plus the accounts derived from it so far."""

    seed: bytes = field(repr=False)
    accounts: List[WalletAccount] = field(default_factory=list)


def generate_wallet(mnemonic: str, password: str = "") -> Wallet:
    """Expand a mnemonic into a wallet holding account 0.

    Raises:
        InvalidParameterError: If the mnemonic is not a valid BIP-39 phrase
    """
    try:
        seed = seed_from_mnemonic(mnemonic, password)
    except MnemonicValidationError as e:
        raise InvalidParameterError(f"mnemonic ({e})")
    wallet = Wallet(seed=seed)
    generate_new_account(wallet)
    return wallet


def generate_new_account(wallet: Wallet) -> WalletAccount:
    """Append the next account to ``wallet`` and return it."""
    index = len(wallet.accounts)
    private_key = key_from_seed(wallet.seed, STACKS_DERIVATION_PATH.format(index=index))
    account = WalletAccount(index=index, stx_private_key=private_key.hex() + COMPRESSED_KEY_SUFFIX)
    wallet.accounts.append(account)
    return account


def get_stx_address(account: WalletAccount, network: NetworkType) -> str:
    """c32 address of the account's compressed public key on ``network``."""
    private_key = keys.PrivateKey(bytes.fromhex(account.stx_private_key[:64]))
    public_key = private_key.public_key.to_compressed_bytes()
    return c32_address(get_network(network).address_version, hash160(public_key))


def derive_child_account(network: NetworkType, mnemonic: str, index: int) -> Account:
    """Derive the account at ``index``, building accounts 0 through ``index``.

    Raises:
        InvalidParameterError: If the index is negative or the mnemonic is invalid
    """
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise InvalidParameterError(f"account index must be a non-negative integer, got {index!r}")

    wallet = generate_wallet(mnemonic)
    for _ in range(index):
        generate_new_account(wallet)

    account = wallet.accounts[index]
    address = get_stx_address(account, network)
    logger.debug(f"Derived account {index} on {network}: {address}")
    return Account(address=address, signing_key=account.stx_private_key)


class MnemonicAccountDeriver(AccountDeriver):
    """AccountDeriver backed by ``derive_child_account``."""

    def derive(self, network: NetworkType, mnemonic: str, index: int) -> Account:
        return derive_child_account(network, mnemonic, index)
