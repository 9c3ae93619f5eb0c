"""
Chain RPC facade for the vault monitor (Demo).

Reads and writes against the vault, lending pool and data store contracts are
mocked. The only live request is the read-only eth_chainId probe used for the
startup summary.
"""
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

# Demo vault snapshot returned by get_vault_balances()
DEMO_VAULTS: List[Dict[str, Any]] = [
    {
        "child_address": "0x1234567890abcdef1234567890abcdef12345678",
        "vault_amount": 1_000_000_000_000_000_000,  # 1 CELO in wei
        "spending_amount": 500_000_000_000_000_000,  # 0.5 CELO
        "is_verified": False,
    }
]
DEMO_SUPPLY_APY = 3.5


class ChainClient:
    """
    Thin wrapper around one chain's JSON-RPC endpoint.
    Contract calls are placeholders until the vault / pool / store ABIs are wired.
    """

    def __init__(self, rpc_url: str, *, name: str = "chain", timeout: float = 5.0) -> None:
        self.rpc_url = rpc_url
        self.name = name
        self._client = httpx.Client(timeout=httpx.Timeout(timeout, connect=timeout))
        self._request_id = 0

    # --- Read-only contract calls (demo) ---
    def get_vault_balances(self, vault_address: str) -> List[Dict[str, Any]]:
        """
        Tracked child vaults for a vault contract as raw records:
        {child_address, vault_amount, spending_amount, is_verified}.
        In production: iterate the vault contract's registered children.
        """
        logger.debug("[DEMO] get_vault_balances chain={} vault={}", self.name, vault_address)
        return [dict(v) for v in DEMO_VAULTS]

    def get_supply_apy(self) -> float:
        """
        Current supply APY (percent) for the lending pool.
        In production: query the pool data provider's reserve data.
        """
        logger.debug("[DEMO] get_supply_apy chain={}", self.name)
        return DEMO_SUPPLY_APY

    # --- Write calls (NO-OP in demo) ---
    def update_vault_growth(self, store_address: str, child_address: str, growth: int) -> Dict[str, Any]:
        logger.info(
            "[DEMO] Would update data store {} on {}: child={} growth={}",
            store_address,
            self.name,
            child_address,
            growth,
        )
        return {"status": "dry_run", "store": store_address, "child": child_address, "growth": growth}

    # --- Live probe ---
    def get_chain_id(self) -> Optional[int]:
        """eth_chainId as an int, or None when the endpoint is unreachable."""
        result = self._post_rpc("eth_chainId")
        if isinstance(result, str):
            try:
                return int(result, 16)
            except ValueError:
                logger.debug("Unexpected eth_chainId result on {}: {}", self.name, result)
        return None

    def close(self) -> None:
        self._client.close()

    # --- Internal helpers ---
    def _post_rpc(self, method: str, params: Optional[List[Any]] = None) -> Any | None:
        self._request_id += 1
        body = {"jsonrpc": "2.0", "id": self._request_id, "method": method, "params": params or []}
        try:
            t0 = time.time()
            r = self._client.post(self.rpc_url, json=body)
            elapsed_ms = (time.time() - t0) * 1000.0
            if r.status_code != 200:
                logger.debug(
                    "RPC {} on {} non-200: {} latency_ms={:.1f}", method, self.name, r.status_code, elapsed_ms
                )
                return None
            payload = r.json()
            logger.debug("RPC {} on {} latency_ms={:.1f}", method, self.name, elapsed_ms)
            if isinstance(payload, dict) and "error" in payload:
                logger.debug("RPC {} on {} returned error: {}", method, self.name, payload["error"])
                return None
            return payload.get("result") if isinstance(payload, dict) else None
        except Exception as e:
            logger.debug("RPC {} on {} failed: {}", method, self.name, e)
        return None
