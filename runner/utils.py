from __future__ import annotations

from runner.types import StepResult


def percentile(values: list[float], p: float) -> float:
    """Compute the p-th percentile using linear interpolation."""
    if not values:
        return 0.0
    s = sorted(values)
    k = (len(s) - 1) * p
    f = int(k)
    c = min(f + 1, len(s) - 1)
    if f == c:
        return s[f]
    d0 = s[f] * (c - k)
    d1 = s[c] * (k - f)
    return d0 + d1


def join(root: str, *parts: str) -> str:
    """Join with "/" the way the agent's callers build paths."""
    return "/".join([root.rstrip("/\\"), *parts])


def summarize(steps: list[StepResult]) -> tuple[dict, int]:
    """Compute summary dict and an exit code from step outcomes."""
    durations = [s.elapsed_ms for s in steps]
    failures = [{"step": s.name, "error": s.error} for s in steps if not s.ok]
    summary = {
        "component": "runner",
        "event": "summary",
        "steps": len(steps),
        "passed": len(steps) - len(failures),
        "failed": len(failures),
        "timings": {
            "avg_ms": round(sum(durations) / len(durations), 2) if durations else 0.0,
            "p95_ms": round(percentile(durations, 0.95), 2),
            "max_ms": round(max(durations), 2) if durations else 0.0,
        },
        "failures": failures,
    }
    exit_code = 0 if (steps and not failures) else 1
    return summary, exit_code
