"""Collaborator interfaces for chain access and key derivation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from .clarity import ClarityValue
from .network import NetworkType
from .transactions import ContractCallOptions, StacksTransaction


@dataclass(frozen=True)
class Account:
    """Derived signing account. ``signing_key`` is secret."""

    address: str
    signing_key: str

    def __repr__(self) -> str:
        return f"Account(address={self.address!r}, signing_key=<redacted>)"


@dataclass
class BroadcastResult:
    """Outcome of a broadcast: a txid, or an error with its reason."""

    txid: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None
    reason_data: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.txid is not None


class ChainReader(ABC):
    """Interface for read-only chain access."""

    @abstractmethod
    async def call_read_only(
        self,
        contract_address: str,
        contract_name: str,
        function_name: str,
        function_args: List[ClarityValue],
        network: NetworkType,
        sender_address: str,
    ) -> ClarityValue:
        """Evaluate a read-only contract function.

        Returns:
            ClarityValue: The decoded function result

        Raises:
            TransportError: If the node cannot be reached or rejects the call
        """
        pass

    @abstractmethod
    async def get_next_nonce(self, address: str, network: NetworkType) -> int:
        """Get the next usable nonce for an address.

        Raises:
            TransportError: If the lookup fails
        """
        pass


class ChainWriter(ABC):
    """Interface for building and broadcasting transactions."""

    @abstractmethod
    async def make_contract_call(self, options: ContractCallOptions) -> StacksTransaction:
        """Build and sign a contract-call transaction."""
        pass

    @abstractmethod
    async def broadcast_transaction(
        self, transaction: StacksTransaction, network: NetworkType
    ) -> BroadcastResult:
        """Submit a signed transaction.

        Returns:
            BroadcastResult: txid on success, error and reason on rejection

        Raises:
            TransportError: If the node cannot be reached
        """
        pass


class AccountDeriver(ABC):
    """Interface for mnemonic-based account derivation."""

    @abstractmethod
    def derive(self, network: NetworkType, mnemonic: str, index: int) -> Account:
        """Derive the account at ``index`` for ``network``."""
        pass
