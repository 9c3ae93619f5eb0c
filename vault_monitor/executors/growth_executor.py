"""
Growth sink: pushes per-vault growth figures to the data store (Demo).
"""
from __future__ import annotations

from loguru import logger

from ..errors import SinkWriteFailed
from ..utils.chain_utils import ChainClient


class GrowthExecutor:
    def __init__(self, client: ChainClient, *, store_address: str) -> None:
        self._client = client
        self.store_address = store_address

    def push_growth(self, account: str, amount: int) -> bool:
        """
        Write one account's growth. Failures are logged and reported as False;
        no retry is attempted.
        """
        logger.info("Updating {} growth: child={}, growth={}", self._client.name, account, amount)
        try:
            self._write(account, amount)
        except SinkWriteFailed as e:
            logger.error("Growth update failed for {}: {}", account, e)
            return False
        return True

    def _write(self, account: str, amount: int) -> None:
        try:
            resp = self._client.update_vault_growth(self.store_address, account, amount)
        except Exception as e:
            raise SinkWriteFailed(f"store {self.store_address} child {account}: {e}") from e
        status = (resp or {}).get("status")
        if status not in ("ok", "dry_run"):
            raise SinkWriteFailed(f"store {self.store_address} child {account}: status={status}")
