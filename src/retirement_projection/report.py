# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Plain-text rendering of verification results and simulation summaries."""

from typing import List, Sequence

from .montecarlo import AggregateResult
from .verification import CheckResult, SECTION_MONTE_CARLO

WIDTH = 60

_PERCENT_KEYS = {'mean', 'std', 'newest_return', 'oldest_return', 'return', 'rate'}
_MONEY_KEYS = {'balance', 'withdrawal', 'portfolio', 'requested', 'actual_withdrawal',
               'ending_balance', 'discrete', 'continuous', 'simulated'}


def _status(passed) -> str:
    if passed is None:
        return ""
    return "PASS" if passed else "FAIL"


def _format_value(key: str, value, as_percent: bool) -> str:
    if key in ('year', 'num_years', 'newest_year', 'oldest_year'):
        return f"{int(value)}"
    if key in _MONEY_KEYS:
        return f"${value:,.2f}"
    if as_percent and key in _PERCENT_KEYS:
        return f"{value * 100:.2f}%"
    if isinstance(value, int):
        return f"{value}"
    return f"{value:.4f}"


def _label(key: str) -> str:
    return key.replace('_', ' ').capitalize()


def render_check(check: CheckResult) -> str:
    """Render one check as an indented block."""
    status = _status(check.passed)
    header = f"  {check.name}" + (f": {status}" if status else "")
    lines = [header]
    # Historical returns are decimals; show them as percentages
    as_percent = check.section != SECTION_MONTE_CARLO
    for key, value in check.details.items():
        lines.append(f"    {_label(key)}: {_format_value(key, value, as_percent)}")
    for row in check.rows:
        parts = [f"{_label(k)}={_format_value(k, v, True)}" for k, v in row.items()]
        lines.append("      " + ", ".join(parts))
    return "\n".join(lines)


def render_verification(checks: Sequence[CheckResult]) -> str:
    """Render a full verification run, grouped by section."""
    lines: List[str] = [
        "=" * WIDTH,
        "MONTE CARLO PROJECTION - VERIFICATION REPORT",
        "=" * WIDTH,
    ]
    section = None
    for check in checks:
        if check.section != section:
            section = check.section
            lines.append("")
            lines.append(section.upper())
            lines.append("-" * 40)
        lines.append(render_check(check))

    graded = [c for c in checks if c.passed is not None]
    failed = [c.name for c in graded if not c.passed]
    lines.append("")
    lines.append("=" * WIDTH)
    lines.append(f"{len(graded) - len(failed)}/{len(graded)} checks passed")
    if failed:
        lines.append("Failed: " + ", ".join(failed))
    lines.append("=" * WIDTH)
    return "\n".join(lines)


def render_aggregate(result: AggregateResult) -> str:
    """Render per-year percentile bands of a simulation as a table."""
    df = result.to_dataframe()
    summary = [
        f"Trials: {result.num_trials}",
        f"Success rate: {result.success_rate:.1%}",
        "",
        df.to_string(float_format=lambda v: f"{v:,.0f}"),
    ]
    return "\n".join(summary)
