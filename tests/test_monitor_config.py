import sys
import unittest
from pathlib import Path

from pydantic import ValidationError

# Ensure the repository root is on sys.path so 'vault_monitor' can be imported
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from vault_monitor.controllers.monitor_controller import (  # noqa: E402
    DEFAULT_CHECK_INTERVAL,
    ZERO_ADDRESS,
    MonitorConfig,
)


class TestMonitorConfigFromEnv(unittest.TestCase):
    def test_defaults_when_environment_is_empty(self):
        cfg = MonitorConfig.from_env({})
        self.assertEqual(cfg.celo_rpc, "https://celo-sepolia-rpc.publicnode.com")
        self.assertEqual(cfg.oasis_rpc, "https://testnet.sapphire.oasis.io")
        self.assertEqual(cfg.vault_address, ZERO_ADDRESS)
        self.assertEqual(cfg.data_store_address, ZERO_ADDRESS)
        self.assertEqual(cfg.check_interval_seconds, 3600)
        self.assertAlmostEqual(cfg.apy_alert_threshold, 2.0)

    def test_values_taken_from_environment(self):
        env = {
            "CELO_RPC_URL": "https://forno.celo.org",
            "SAPPHIRE_TESTNET_RPC": "https://sapphire.oasis.io",
            "SCHOLAR_FI_VAULT": "0x00000000000000000000000000000000000000aa",
            "CHILD_DATA_STORE": "0x00000000000000000000000000000000000000bb",
            "CHECK_INTERVAL": "60",
        }
        cfg = MonitorConfig.from_env(env)
        self.assertEqual(cfg.celo_rpc, "https://forno.celo.org")
        self.assertEqual(cfg.oasis_rpc, "https://sapphire.oasis.io")
        self.assertEqual(cfg.vault_address, "0x00000000000000000000000000000000000000aa")
        self.assertEqual(cfg.data_store_address, "0x00000000000000000000000000000000000000bb")
        self.assertEqual(cfg.check_interval_seconds, 60)

    def test_unparsable_interval_falls_back_to_default(self):
        for raw in ("abc", "1.5", "0", "-30", "", "1_000", "١٢٠", " 120 ", "120\n", str(2**64)):
            with self.subTest(raw=raw):
                cfg = MonitorConfig.from_env({"CHECK_INTERVAL": raw})
                self.assertEqual(cfg.check_interval_seconds, DEFAULT_CHECK_INTERVAL)

    def test_interval_accepts_plain_and_plus_signed_digits(self):
        self.assertEqual(MonitorConfig.from_env({"CHECK_INTERVAL": "120"}).check_interval_seconds, 120)
        self.assertEqual(MonitorConfig.from_env({"CHECK_INTERVAL": "+90"}).check_interval_seconds, 90)
        self.assertEqual(MonitorConfig.from_env({"CHECK_INTERVAL": "007"}).check_interval_seconds, 7)

    def test_empty_string_counts_as_absent(self):
        cfg = MonitorConfig.from_env({"CELO_RPC_URL": "   "})
        self.assertEqual(cfg.celo_rpc, "https://celo-sepolia-rpc.publicnode.com")

    def test_one_bad_variable_does_not_reset_the_others(self):
        cfg = MonitorConfig.from_env({"CHECK_INTERVAL": "soon", "CELO_RPC_URL": "https://forno.celo.org"})
        self.assertEqual(cfg.celo_rpc, "https://forno.celo.org")
        self.assertEqual(cfg.check_interval_seconds, DEFAULT_CHECK_INTERVAL)


class TestMonitorConfigOverrides(unittest.TestCase):
    def test_overrides_replace_only_given_fields(self):
        base = MonitorConfig.from_env({"CHECK_INTERVAL": "60"})
        cfg = base.with_overrides({"apy_alert_threshold": 3.0})
        self.assertEqual(cfg.check_interval_seconds, 60)
        self.assertAlmostEqual(cfg.apy_alert_threshold, 3.0)
        # Original is untouched
        self.assertAlmostEqual(base.apy_alert_threshold, 2.0)

    def test_unknown_keys_are_rejected(self):
        with self.assertRaises(ValidationError):
            MonitorConfig().with_overrides({"check_interval": 10})

    def test_non_positive_interval_is_rejected(self):
        with self.assertRaises(ValidationError):
            MonitorConfig(check_interval_seconds=0)

    def test_config_is_immutable(self):
        cfg = MonitorConfig()
        with self.assertRaises(ValidationError):
            cfg.check_interval_seconds = 10


if __name__ == "__main__":
    unittest.main()
