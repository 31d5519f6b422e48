from __future__ import annotations

import re
from typing import Any

_DURATION_PATTERN = re.compile(r"\bin (\d+(?:\.\d+)?)s\b")
_COUNT_PATTERN = re.compile(
    r"(\d+) (passed|failed|errors?|skipped|xfailed|xpassed|deselected|warnings?)\b"
)
_NO_TESTS_PATTERN = re.compile(r"\bno tests ran\b")

COUNT_KEYS = ("passed", "failed", "errors", "skipped", "xfailed", "xpassed", "deselected", "warnings")


def parse_summary(output: str) -> dict[str, Any]:
    """
    Parse the last pytest summary line, e.g. "3 passed, 1 skipped in 0.12s".

    Raises ValueError when no summary line is present.
    """
    for line in reversed(output.splitlines()):
        duration = _DURATION_PATTERN.search(line)
        if duration is None:
            continue
        counts = _COUNT_PATTERN.findall(line)
        if not counts and not _NO_TESTS_PATTERN.search(line):
            continue

        summary: dict[str, Any] = {key: 0 for key in COUNT_KEYS}
        for value, label in counts:
            summary[_normalize_label(label)] += int(value)
        summary["duration_s"] = float(duration.group(1))
        return summary

    raise ValueError("no pytest summary line found in output")


def _normalize_label(label: str) -> str:
    if label == "error":
        return "errors"
    if label == "warning":
        return "warnings"
    return label
