"""
APY health check for rebalancing alerts.
"""
from __future__ import annotations

from loguru import logger

ALERT_TAG = "ALERT"


class ApyGuard:
    def __init__(self, *, threshold: float) -> None:
        self.threshold = threshold

    def is_below_threshold(self, apy: float) -> bool:
        return apy < self.threshold

    def evaluate(self, apy: float) -> bool:
        """
        Log the APY verdict. Returns True when an alert was raised. The alert is
        informational only; no rebalancing is triggered.
        """
        if self.is_below_threshold(apy):
            logger.warning(
                "{} APY {:.2f}% below threshold ({:.1f}%). Consider rebalancing!",
                ALERT_TAG,
                apy,
                self.threshold,
            )
            return True
        logger.info("APY is healthy ({:.2f}% >= {:.1f}%)", apy, self.threshold)
        return False
