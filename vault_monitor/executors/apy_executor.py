"""
Lending pool APY source (Demo).
"""
from __future__ import annotations

import math

from loguru import logger

from ..errors import SourceUnavailable
from ..utils.chain_utils import ChainClient


class ApyExecutor:
    def __init__(self, client: ChainClient) -> None:
        self._client = client

    def fetch_rate(self) -> float:
        """Current supply APY in percent (3.5 means 3.5%)."""
        logger.info("Checking lending pool APY on {}...", self._client.name)
        try:
            rate = float(self._client.get_supply_apy())
        except Exception as e:
            raise SourceUnavailable(f"APY on {self._client.name}: {e}") from e
        if not math.isfinite(rate):
            raise SourceUnavailable(f"APY on {self._client.name} is not a finite number: {rate}")
        return rate
