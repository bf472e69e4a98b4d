import argparse
import logging
import random
from typing import Optional, Sequence

from .config import SimulationConfig, load_config
from .evaluation import evaluate_candidate, run_evaluations, save_results_json, summarize
from .generator import generate_table
from .output import timestamped_path
from .parser import load_table
from .visualization import plot_gantt

logger = logging.getLogger("gamus")


def run(config: SimulationConfig) -> dict:
    """Evaluate ``config.runs`` random candidates and write the outputs.

    Returns the summary dictionary (also stored in the JSON file).
    """
    if config.generator is not None:
        gen = config.generator
        table = generate_table(
            gen.jobs,
            gen.operations,
            gen.machines,
            seed=gen.seed,
            max_duration=gen.max_duration,
            zero_share=gen.zero_share,
        )
        table_name = (
            f"generated_j{gen.jobs}_o{gen.operations}_m{gen.machines}_seed{gen.seed}"
        )
    else:
        table = load_table(config.table)
        table_name = config.table
    logger.info(
        "Table: %s operations=%d machines=%d limit=%d runs=%d",
        table_name,
        len(table) - 1,
        len(table[0]) - 2,
        config.limit,
        config.runs,
    )

    rng = random.Random(config.seed) if config.seed is not None else random.Random()
    results = run_evaluations(
        table,
        config.runs,
        config.limit,
        min_start=config.min_start,
        max_start=config.max_start,
        rng=rng,
    )

    if config.print_report:
        for idx, result in enumerate(results, start=1):
            print(
                f"=== Run {idx}: start_collisions={result.start_collisions} "
                f"orphan_ends={result.orphan_ends} undone={result.undone_operations} "
                f"total_time={result.total_time_used}"
            )
            print(result.report, end="")

    save_results_json(
        results,
        config.output_dir,
        table_name=table_name,
        limit=config.limit,
        seed=config.seed,
    )

    if config.gantt:
        for idx, result in enumerate(results, start=1):
            # re-simulate from the recorded starts to get the final entity state
            _, work_unit = evaluate_candidate(
                table, config.limit, start_times=result.start_times, return_work_unit=True
            )
            out_path = timestamped_path(config.output_dir, f"gantt_run{idx}", ".png")
            plot_gantt(work_unit, save_path=out_path, title=f"Run {idx}")
            logger.info("Saved Gantt chart to %s", out_path)

    summary = summarize(results)
    logger.info(
        "Summary: feasible=%d/%d avg_collisions=%.2f avg_orphans=%.2f avg_undone=%.2f",
        summary["feasible_runs"],
        summary["runs"],
        summary["start_collisions"]["avg"],
        summary["orphan_ends"]["avg"],
        summary["undone_operations"]["avg"],
    )
    return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Job-shop candidate schedule simulator")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to a YAML/JSON config file",
    )
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run(config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
