"""
Vault balance source (Demo).
"""
from __future__ import annotations

from typing import List

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import SourceUnavailable
from ..utils.chain_utils import ChainClient
from ..utils.growth import U128_MAX


class VaultBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    child_address: str
    vault_amount: int = Field(ge=0, le=U128_MAX)
    spending_amount: int = Field(ge=0, le=U128_MAX)
    is_verified: bool = False


class VaultBalanceExecutor:
    def __init__(self, client: ChainClient, *, vault_address: str) -> None:
        self._client = client
        self.vault_address = vault_address

    def fetch_balances(self) -> List[VaultBalance]:
        """
        Snapshot of every tracked child vault. Raises SourceUnavailable when the
        source cannot be read or returns records that do not parse.
        """
        logger.info("Fetching vault balances from {}...", self._client.name)
        try:
            raw = self._client.get_vault_balances(self.vault_address)
        except Exception as e:
            raise SourceUnavailable(f"vault {self.vault_address} on {self._client.name}: {e}") from e
        try:
            return [VaultBalance.model_validate(r) for r in raw or []]
        except ValidationError as e:
            raise SourceUnavailable(f"malformed vault record from {self.vault_address}: {e}") from e
