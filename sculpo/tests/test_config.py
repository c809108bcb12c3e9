"""Tests for configuration, the exception taxonomy and logger setup."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import unittest
from unittest.mock import patch

from sculpo.config import PostgresConfig, SchedulingConfig, load_postgres_config, load_scheduling_config
from sculpo.core.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    NotFoundError,
    ProjectError,
    StoreFailureError,
)
from sculpo.core.logger import LoggerConfig, configure


class TestSchedulingConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = SchedulingConfig()
        self.assertEqual(cfg.timezone, "UTC")
        self.assertEqual(cfg.search_horizon_days, 30)
        self.assertEqual(cfg.booking_lookup_cap, 50)
        self.assertEqual(cfg.default_block_reason, "Blocked by trainer")
        self.assertEqual(str(cfg.tzinfo), "UTC")

    def test_from_env(self):
        env = {"SCHEDULING_TIMEZONE": "Europe/Lisbon", "NEXT_SLOTS_HORIZON_DAYS": "14"}
        with patch.dict(os.environ, env, clear=False):
            cfg = load_scheduling_config(booking_lookup_cap=20)
        self.assertEqual(cfg.timezone, "Europe/Lisbon")
        self.assertEqual(cfg.search_horizon_days, 14)
        self.assertEqual(cfg.booking_lookup_cap, 20)

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            SchedulingConfig(timezone="Mars/Olympus_Mons")
        with self.assertRaises(ValueError):
            SchedulingConfig(search_horizon_days=0)
        with self.assertRaises(ValueError):
            SchedulingConfig(store_timeout_seconds=0)
        with patch.dict(os.environ, {"NEXT_SLOTS_BOOKING_CAP": "lots"}):
            with self.assertRaises(ValueError) as ctx:
                load_scheduling_config()
        self.assertIn("Invalid scheduling configuration", str(ctx.exception))


class TestPostgresConfig(unittest.TestCase):
    def test_async_url(self):
        cfg = PostgresConfig(url="postgres://u:p@db:5432/sculpo")
        self.assertEqual(cfg.async_url, "postgresql+asyncpg://u:p@db:5432/sculpo")
        cfg = PostgresConfig(url="postgresql+asyncpg://db/sculpo")
        self.assertEqual(cfg.async_url, "postgresql+asyncpg://db/sculpo")

    def test_from_env(self):
        env = {"DATABASE_URL": "postgresql://db/sculpo", "DB_POOL_SIZE": "3", "DB_ECHO": "yes"}
        with patch.dict(os.environ, env):
            cfg = load_postgres_config()
        self.assertEqual((cfg.pool_size, cfg.echo), (3, True))
        self.assertEqual(cfg.pool_recycle, 1800)

    def test_rejects_bad_values(self):
        with self.assertRaises(ValueError):
            PostgresConfig(url="mysql://db/sculpo")
        with self.assertRaises(ValueError):
            PostgresConfig(url="")
        with self.assertRaises(ValueError):
            PostgresConfig(url="postgresql://db/sculpo", pool_size=0)


class TestExceptions(unittest.TestCase):
    def test_status_and_code_per_type(self):
        expected = {
            InvalidArgumentError: ("INVALID_ARGUMENT", 400),
            NotFoundError: ("NOT_FOUND", 404),
            StoreFailureError: ("STORE_FAILURE", 503),
            ConfigurationError: ("CONFIGURATION_ERROR", 500),
        }
        for cls, (code, status) in expected.items():
            with self.subTest(cls=cls.__name__):
                err = cls("boom")
                self.assertIsInstance(err, ProjectError)
                self.assertEqual((err.code, err.http_status), (code, status))

    def test_to_dict(self):
        cause = TimeoutError("slow")
        err = StoreFailureError("lookup timed out", details={"operation": "x"}, cause=cause)
        out = err.to_dict()
        self.assertEqual(out["message"], "lookup timed out")
        self.assertEqual(out["details"], {"operation": "x"})
        self.assertEqual(out["cause"], "slow")
        self.assertNotIn("cause_traceback", out)
        self.assertIn("cause_traceback", err.to_dict(include_trace=True))
        self.assertNotIn("details", InvalidArgumentError("bad").to_dict())


class TestLogger(unittest.TestCase):
    def test_with_overrides_ignores_none(self):
        cfg = LoggerConfig().with_overrides(level="DEBUG", log_dir=None)
        self.assertEqual(cfg.level, "DEBUG")
        self.assertIsNone(cfg.log_dir)

    def test_file_handler_writes_json_lines(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = LoggerConfig(log_dir=tmp, console=False, root_name="sculpo_test", log_file_basename="t")
            configure(cfg)
            root = logging.getLogger("sculpo_test")
            try:
                logging.getLogger("sculpo_test.booking").info("queued %s", "b1", extra={"trainer_id": "t1"})
                for handler in root.handlers:
                    handler.flush()
                with open(os.path.join(tmp, "t.log"), encoding="utf-8") as fh:
                    record = json.loads(fh.readline())
            finally:
                for handler in list(root.handlers):
                    handler.close()
                    root.removeHandler(handler)

        self.assertEqual(record["message"], "queued b1")
        self.assertEqual(record["level"], "INFO")
        self.assertEqual(record["logger"], "sculpo_test.booking")
        self.assertEqual(record["fields"], {"trainer_id": "t1"})


if __name__ == "__main__":
    unittest.main()
