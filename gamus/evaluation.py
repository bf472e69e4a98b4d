"""Evaluation of candidate start-time assignments.

Every evaluation loads its own ``WorkUnit`` so results never leak state
between candidates. ``run_evaluations`` draws several random candidates in
sequence and ``save_results_json`` persists the per-run values with simple
aggregates.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from .output import timestamped_path
from .work_unit import WorkUnit

logger = logging.getLogger("gamus.evaluation")


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of simulating one candidate.

    Fields:
        start_collisions: Starts refused because the machine was held.
        orphan_ends: Ends reached while the machine was free.
        undone_operations: Operations not finished within the limit.
        total_time_used: Latest end among completed actions.
        start_times: Start per action in flat action order.
        report: Text report of the final state.
    """

    start_collisions: int
    orphan_ends: int
    undone_operations: int
    total_time_used: int
    start_times: list[int]
    report: str

    @property
    def feasible(self) -> bool:
        return self.start_collisions == 0 and self.orphan_ends == 0 and self.undone_operations == 0


def evaluate_candidate(
    data: Sequence[Sequence[Any]],
    limit: int,
    start_times: Optional[Sequence[int]] = None,
    min_start: int = 0,
    max_start: Optional[int] = None,
    rng: Optional[random.Random] = None,
    return_work_unit: bool = False,
) -> EvaluationResult | tuple[EvaluationResult, WorkUnit]:
    """Simulate one candidate on a freshly loaded work unit.

    Args:
        data: Problem table.
        limit: Number of simulated ticks.
        start_times: Explicit starts in flat action order; when None starts
            are drawn from ``[min_start, max_start]``.
        min_start: Lower bound for random starts.
        max_start: Upper bound for random starts, defaults to ``limit - 1``.
        rng: Random source for random starts.
        return_work_unit: Also return the simulated work unit.
    """
    if limit < 1:
        raise ValueError(f"limit must be positive: {limit}")
    work_unit = WorkUnit(data, rng=rng)
    work_unit.load()
    if start_times is not None:
        work_unit.set_start_times(start_times)
    else:
        work_unit.adjust_random_times(min_start, limit - 1 if max_start is None else max_start)

    start_collisions, orphan_ends = work_unit.simulate(limit)
    result = EvaluationResult(
        start_collisions=start_collisions,
        orphan_ends=orphan_ends,
        undone_operations=work_unit.number_of_undone_operations(),
        total_time_used=work_unit.total_time_used(),
        start_times=work_unit.start_times(),
        report=work_unit.report(),
    )
    if return_work_unit:
        return result, work_unit
    return result


def run_evaluations(
    data: Sequence[Sequence[Any]],
    runs: int,
    limit: int,
    min_start: int = 0,
    max_start: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> list[EvaluationResult]:
    """Evaluate ``runs`` independent random candidates one after another."""
    if runs < 1:
        raise ValueError(f"runs must be positive: {runs}")
    if rng is None:
        rng = random.Random()
    results: list[EvaluationResult] = []
    for i in range(1, runs + 1):
        result = evaluate_candidate(
            data, limit, min_start=min_start, max_start=max_start, rng=rng
        )
        results.append(result)
        if i % max(1, runs // 10) == 0:
            logger.info(
                "Progress %d/%d: collisions=%d orphans=%d undone=%d time=%d",
                i,
                runs,
                result.start_collisions,
                result.orphan_ends,
                result.undone_operations,
                result.total_time_used,
            )
    return results


def summarize(results: Sequence[EvaluationResult]) -> dict[str, Any]:
    def _avg(vals: list[int]) -> float:
        return sum(vals) / len(vals) if vals else float("nan")

    summary: dict[str, Any] = {"runs": len(results)}
    for key in ("start_collisions", "orphan_ends", "undone_operations", "total_time_used"):
        vals = [getattr(r, key) for r in results]
        summary[key] = {
            "avg": _avg(vals),
            "min": min(vals, default=None),
            "max": max(vals, default=None),
        }
    summary["feasible_runs"] = sum(1 for r in results if r.feasible)
    return summary


def save_results_json(
    results: Sequence[EvaluationResult],
    out_dir: str,
    table_name: str,
    limit: int,
    seed: Optional[int] = None,
) -> str:
    """Write per-run values and the summary to ``evaluation_<stamp>.json``."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_path = timestamped_path(out_dir, "evaluation", ".json", stamp=stamp)
    per_run = []
    for idx, result in enumerate(results, start=1):
        entry = asdict(result)
        entry.pop("report")
        entry["run"] = idx
        per_run.append(entry)
    payload = {
        "table": table_name,
        "limit": limit,
        "seed": seed,
        "timestamp": stamp,
        "per_run": per_run,
        "summary": summarize(results),
    }
    with open(results_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved evaluation results JSON to %s", results_path)
    return results_path
