"""
Vault Growth Monitor Controller (Demo)

Every check interval: fetch vault balances, check the lending pool APY, and
push a daily growth estimate per vault to the data store chain. Chain access
is abstracted via utils.chain_utils; contract calls are mocked.
"""
from __future__ import annotations

import os
import re
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..controllers.apy_guard import ApyGuard
from ..errors import SourceUnavailable
from ..executors.apy_executor import ApyExecutor
from ..executors.growth_executor import GrowthExecutor
from ..executors.vault_balance_executor import VaultBalance, VaultBalanceExecutor
from ..utils.chain_utils import ChainClient
from ..utils.growth import daily_growth

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_CHECK_INTERVAL = 3600

# Config field -> environment variable
ENV_VARS: Dict[str, str] = {
    "celo_rpc": "CELO_RPC_URL",
    "oasis_rpc": "SAPPHIRE_TESTNET_RPC",
    "vault_address": "SCHOLAR_FI_VAULT",
    "data_store_address": "CHILD_DATA_STORE",
}
INTERVAL_ENV = "CHECK_INTERVAL"
U64_MAX = 2**64 - 1
_INTERVAL_RE = re.compile(r"\+?[0-9]+")


class MonitorConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    celo_rpc: str = "https://celo-sepolia-rpc.publicnode.com"
    oasis_rpc: str = "https://testnet.sapphire.oasis.io"
    vault_address: str = ZERO_ADDRESS
    data_store_address: str = ZERO_ADDRESS
    check_interval_seconds: int = Field(default=DEFAULT_CHECK_INTERVAL, gt=0)
    # Rebalancing alert fires when APY (percent) is strictly below this
    apy_alert_threshold: float = 2.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MonitorConfig":
        """
        Build the config from environment variables. Each field falls back to
        its default when the variable is absent, empty, or unparsable.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for field, var in ENV_VARS.items():
            raw = (env.get(var) or "").strip()
            if raw:
                values[field] = raw
        raw_interval = env.get(INTERVAL_ENV) or ""
        interval = _parse_interval(raw_interval)
        if interval is not None:
            values["check_interval_seconds"] = interval
        elif raw_interval.strip():
            logger.warning(
                "Ignoring unparsable {}={!r}; using default {}s",
                INTERVAL_ENV,
                raw_interval,
                DEFAULT_CHECK_INTERVAL,
            )
        return cls(**values)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "MonitorConfig":
        return type(self).model_validate({**self.model_dump(), **dict(overrides)})


def _parse_interval(raw: str) -> Optional[int]:
    """Unsigned 64-bit decimal seconds; no whitespace, separators or non-ASCII digits."""
    if not _INTERVAL_RE.fullmatch(raw):
        return None
    value = int(raw)
    return value if 0 < value <= U64_MAX else None


class CyclePhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class ControllerState:
    running: bool = False
    phase: CyclePhase = CyclePhase.IDLE
    cycles: int = 0


class VaultMonitorController:
    """Orchestrates balance and APY fetches, the APY alert and growth pushes."""

    def __init__(
        self,
        config: MonitorConfig,
        *,
        source_client: Optional[ChainClient] = None,
        sink_client: Optional[ChainClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.state = ControllerState()
        self._source_client = source_client or ChainClient(config.celo_rpc, name="celo")
        self._sink_client = sink_client or ChainClient(config.oasis_rpc, name="oasis")
        self.balance_exec = VaultBalanceExecutor(self._source_client, vault_address=config.vault_address)
        self.apy_exec = ApyExecutor(self._source_client)
        self.growth_exec = GrowthExecutor(self._sink_client, store_address=config.data_store_address)
        self.guard = ApyGuard(threshold=config.apy_alert_threshold)
        self._clock = clock

    def start(self) -> None:
        logger.info("========================================")
        logger.info("Vault Growth Monitor Started")
        logger.info("========================================")
        logger.info("Celo RPC: {}", self.config.celo_rpc)
        logger.info("Oasis RPC: {}", self.config.oasis_rpc)
        logger.info("Vault Address: {}", self.config.vault_address)
        logger.info("Data Store: {}", self.config.data_store_address)
        logger.info("Check Interval: {}s", self.config.check_interval_seconds)
        logger.info("APY Alert Threshold: {}%", self.config.apy_alert_threshold)
        logger.info("========================================")
        # One-time startup probe; unreachable endpoints are reported, not fatal
        for client in (self._source_client, self._sink_client):
            chain_id = client.get_chain_id()
            logger.info("Startup summary {}: rpc={} chainId={}", client.name, client.rpc_url, chain_id)
        self.state.running = True

    def stop(self) -> None:
        logger.info("Stopping VaultMonitorController")
        self.state.running = False
        self._source_client.close()
        self._sink_client.close()

    # --- Collaborator calls ---
    def fetch_balances(self) -> List[VaultBalance]:
        return self.balance_exec.fetch_balances()

    def fetch_rate(self) -> float:
        return self.apy_exec.fetch_rate()

    def push_growth(self, account: str, amount: int) -> bool:
        return self.growth_exec.push_growth(account, amount)

    # --- Cycle ---
    def run_cycle(self) -> bool:
        """
        One fetch -> compute -> push pass. Returns True when the cycle reached
        the push stage, False when a fetch failed and the cycle ended early.
        """
        self.state.phase = CyclePhase.RUNNING
        logger.info("=== Monitoring Cycle Started ===")
        try:
            return self._cycle()
        finally:
            self.state.phase = CyclePhase.IDLE
            self.state.cycles += 1
            logger.info("=== Monitoring Cycle Complete ===")

    def _cycle(self) -> bool:
        # 1) Vault balances from the source chain
        try:
            vaults = self.fetch_balances()
        except SourceUnavailable as e:
            logger.error("Failed to fetch vault balances: {}", e)
            return False
        logger.info("Found {} active vaults", len(vaults))

        # 2) Lending pool APY
        try:
            apy = self.fetch_rate()
        except SourceUnavailable as e:
            logger.error("Failed to check APY: {}", e)
            return False
        logger.info("Current APY: {:.2f}%", apy)

        # 3) Rebalancing alert (log only)
        self.guard.evaluate(apy)

        # 4) Push growth per vault; one failed write does not stop the rest
        for vault in vaults:
            growth = daily_growth(vault.vault_amount, apy)
            self.push_growth(vault.child_address, growth)
        return True

    def run(self, stop_event: Optional[threading.Event] = None, *, max_cycles: Optional[int] = None) -> int:
        """
        Run cycles on the configured interval until `stop_event` is set (or
        `max_cycles` have run). The first cycle starts immediately. A cycle
        that overruns its window starts the next one right away and the
        schedule restarts from there, so ticks are never replayed in a burst.
        Returns the number of cycles run.
        """
        stop = stop_event if stop_event is not None else threading.Event()
        interval = float(self.config.check_interval_seconds)
        cycles = 0
        next_tick = self._clock()
        while not stop.is_set():
            now = self._clock()
            if now < next_tick:
                stop.wait(next_tick - now)
                continue
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Monitoring cycle aborted by unexpected error")
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            next_tick += interval
            now = self._clock()
            if next_tick < now:
                logger.warning("Cycle overran the {}s interval; starting next cycle now", self.config.check_interval_seconds)
                next_tick = now
        logger.info("Monitor loop stopped after {} cycles", cycles)
        return cycles
