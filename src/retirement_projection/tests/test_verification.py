# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for the verification suite, report rendering and settings.
"""

import importlib
import io
import os
import unittest
from contextlib import redirect_stdout
from unittest.mock import Mock, patch

from .. import __main__ as entry_point
from .. import settings
from .. import verification
from ..history.fetcher import embedded_history
from ..montecarlo.config import SimulationConfig
from ..montecarlo.simulator import MonteCarloEngine
from ..report import render_aggregate, render_check, render_verification
from ..verification import (
    CheckResult,
    SECTION_MONTE_CARLO,
    check_box_muller,
    check_compound_returns,
    check_fixed_withdrawal_with_inflation,
    check_gbm_convergence,
    check_history_source,
    check_percentage_withdrawal,
    check_percentiles,
    check_withdrawal_limit,
    describe_history,
    run_verification,
)


class TestDeterministicChecks(unittest.TestCase):
    """Checks with no randomness always pass."""

    def test_percentage_withdrawal(self):
        result = check_percentage_withdrawal()
        self.assertTrue(result.passed)
        self.assertAlmostEqual(result.details['actual_year3'], 127_776, places=2)
        self.assertEqual(len(result.rows), 5)
        self.assertEqual(result.rows[0]['withdrawal'], 0.0)
        self.assertAlmostEqual(result.rows[2]['rate'], 0.04)

    def test_fixed_withdrawal_with_inflation(self):
        result = check_fixed_withdrawal_with_inflation()
        self.assertTrue(result.passed)
        self.assertAlmostEqual(result.details['actual_year3_withdrawal'], 41_000, places=4)

    def test_withdrawal_limit(self):
        result = check_withdrawal_limit()
        self.assertTrue(result.passed)
        self.assertEqual(result.details['actual_withdrawal'], 30_000)
        self.assertEqual(result.details['ending_balance'], 0.0)

    def test_percentiles(self):
        result = check_percentiles()
        self.assertTrue(result.passed)
        self.assertEqual(result.details, {'p5': 6, 'p50': 51, 'p95': 96})

    def test_compound_returns(self):
        result = check_compound_returns()
        self.assertTrue(result.passed)
        self.assertAlmostEqual(result.details['multiple'], 1.17 ** 30, places=6)
        self.assertGreater(result.details['continuous'], result.details['discrete'])


class TestStochasticChecks(unittest.TestCase):
    """Seeded stochastic checks."""

    def test_gbm_convergence(self):
        result = check_gbm_convergence(seed=2024)
        self.assertTrue(result.passed)
        self.assertAlmostEqual(result.details['expected_log_return'], 0.08)

    def test_box_muller(self):
        result = check_box_muller(seed=12345)
        self.assertTrue(result.passed)

    def test_single_draw_fails_tolerance(self):
        """One draw has zero spread and all-or-nothing coverage, so it fails."""
        result = check_box_muller(num_samples=1, seed=0)
        self.assertIs(result.passed, False)
        self.assertEqual(result.details['std'], 0.0)
        self.assertIn(result.details['within_1_sigma_pct'], (0.0, 100.0))


class TestHistoryChecks(unittest.TestCase):
    """Historical descriptions are informational."""

    def test_full_history(self):
        result = describe_history(embedded_history())
        self.assertIsNone(result.passed)
        self.assertEqual(result.details['num_years'], 99)
        self.assertIn("1926-2024", result.name)

    def test_recent_history(self):
        result = describe_history(embedded_history(), recent_years=15)
        self.assertEqual(result.details['num_years'], 15)
        self.assertEqual(len(result.rows), 15)
        self.assertEqual(result.rows[0], {'year': 2024, 'return': 0.2502})

    def test_history_source(self):
        result = check_history_source(embedded_history())
        self.assertTrue(result.passed)
        self.assertEqual(result.details['newest_return'], 0.2502)
        self.assertEqual(result.details['oldest_return'], 0.1162)
        self.assertIn("embedded", result.name)


class TestRunVerification(unittest.TestCase):
    """Tests for run_verification."""

    def test_all_checks_pass(self):
        checks = run_verification(seed=2024, history=embedded_history())
        self.assertEqual(len(checks), 10)
        failed = [c.name for c in checks if c.passed is False]
        self.assertEqual(failed, [])

    def test_loader_called_once_when_no_history(self):
        loader = Mock(return_value=embedded_history())
        with patch.object(verification, 'check_gbm_convergence',
                          return_value=CheckResult("gbm", SECTION_MONTE_CARLO, True)), \
                patch.object(verification, 'check_box_muller',
                             return_value=CheckResult("bm", SECTION_MONTE_CARLO, True)):
            checks = run_verification(loader=loader)
        loader.assert_called_once_with()
        self.assertEqual(checks[-1].details['num_years'], 99)


class TestReport(unittest.TestCase):
    """Tests for the text report."""

    def test_render_check(self):
        text = render_check(check_withdrawal_limit())
        self.assertIn("Withdrawal limit: PASS", text)
        self.assertIn("$30,000.00", text)

    def test_historical_values_shown_as_percent(self):
        text = render_check(describe_history(embedded_history(), recent_years=15))
        self.assertIn("25.02%", text)

    def test_render_verification_summary(self):
        checks = [
            CheckResult("ok", SECTION_MONTE_CARLO, True, {'value': 1.0}),
            CheckResult("broken", SECTION_MONTE_CARLO, False),
            describe_history(embedded_history()),
        ]
        text = render_verification(checks)
        self.assertIn("MONTE CARLO CALCULATION", text)
        self.assertIn("HISTORICAL DATA STATISTICS", text)
        self.assertIn("1/2 checks passed", text)
        self.assertIn("Failed: broken", text)

    def test_render_aggregate(self):
        config = SimulationConfig(1_000, 0.05, 0.1, horizon_years=3,
                                  num_trials=20, random_seed=1)
        text = render_aggregate(MonteCarloEngine().simulate(config))
        self.assertIn("Trials: 20", text)
        self.assertIn("Success rate: 100.0%", text)
        self.assertIn("Median", text)


class TestEntryPoint(unittest.TestCase):
    """Tests for python -m retirement_projection."""

    def _run_main(self, checks):
        out = io.StringIO()
        with patch.object(entry_point, 'load_historical_returns', return_value=embedded_history()), \
                patch.object(entry_point, 'run_verification', return_value=checks) as mock_run, \
                redirect_stdout(out):
            code = entry_point.main()
        return code, out.getvalue(), mock_run

    def test_exit_code_zero_when_all_pass(self):
        code, output, mock_run = self._run_main(
            [CheckResult("ok", SECTION_MONTE_CARLO, True)]
        )
        self.assertEqual(code, 0)
        self.assertIn("1/1 checks passed", output)
        self.assertEqual(mock_run.call_args.kwargs['seed'], settings.verify_random_seed())

    def test_seed_read_from_environment_at_run_time(self):
        with patch.dict(os.environ, {"VERIFY_RANDOM_SEED": "7"}):
            _, _, mock_run = self._run_main([CheckResult("ok", SECTION_MONTE_CARLO, True)])
        self.assertEqual(mock_run.call_args.kwargs['seed'], 7)

    def test_exit_code_one_on_failure(self):
        code, _, _ = self._run_main([CheckResult("bad", SECTION_MONTE_CARLO, False)])
        self.assertEqual(code, 1)


class TestSettings(unittest.TestCase):
    """Tests for environment parsing helpers."""

    def test_bool_values(self):
        with patch.dict(os.environ, {"FLAG": "false"}):
            self.assertFalse(settings._get_bool("FLAG", True))
        with patch.dict(os.environ, {"FLAG": "Yes"}):
            self.assertTrue(settings._get_bool("FLAG", False))
        with patch.dict(os.environ, {"FLAG": ""}):
            self.assertTrue(settings._get_bool("FLAG", True))

    def test_float_values(self):
        with patch.dict(os.environ, {"TIMEOUT": "2.5"}):
            self.assertEqual(settings._get_float("TIMEOUT", 10.0), 2.5)
        with patch.dict(os.environ, {"TIMEOUT": "soon"}):
            with self.assertRaises(ValueError):
                settings._get_float("TIMEOUT", 10.0)

    def test_optional_int(self):
        with patch.dict(os.environ, {"SEED": "42"}):
            self.assertEqual(settings._get_optional_int("SEED"), 42)
        with patch.dict(os.environ, {"SEED": ""}):
            self.assertIsNone(settings._get_optional_int("SEED"))

    def test_malformed_numbers_do_not_break_import(self):
        """Bad numeric values surface when read, not when the module loads."""
        bad = {"HISTORY_FETCH_TIMEOUT": "soon", "VERIFY_RANDOM_SEED": "abc"}
        try:
            with patch.dict(os.environ, bad):
                importlib.reload(settings)
                with self.assertRaises(ValueError):
                    settings.history_fetch_timeout()
                with self.assertRaises(ValueError):
                    settings.verify_random_seed()
        finally:
            importlib.reload(settings)

    def test_numeric_settings_defaults(self):
        with patch.dict(os.environ, {"HISTORY_FETCH_TIMEOUT": "", "VERIFY_RANDOM_SEED": ""}):
            self.assertEqual(settings.history_fetch_timeout(), 10.0)
            self.assertIsNone(settings.verify_random_seed())
        with patch.dict(os.environ, {"HISTORY_FETCH_TIMEOUT": "3", "VERIFY_RANDOM_SEED": "42"}):
            self.assertEqual(settings.history_fetch_timeout(), 3.0)
            self.assertEqual(settings.verify_random_seed(), 42)


if __name__ == '__main__':
    unittest.main()
