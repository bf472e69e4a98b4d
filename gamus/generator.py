import random

from .parser import Table


def generate_table(
    jobs: int,
    operations: int,
    machines: int,
    seed: int = 0,
    max_duration: int = 99,
    zero_share: float = 0.0,
) -> Table:
    """Generate a random problem table.

    Every job gets ``operations`` rows; the job name is written on the first
    row only. Durations come from ``[1, max_duration]``; with probability
    ``zero_share`` a cell is 0 (the machine cannot process the operation).
    """
    if jobs < 1 or operations < 1 or machines < 1:
        raise ValueError("jobs, operations and machines must be positive")
    if max_duration < 1:
        raise ValueError("max_duration must be positive")
    if not 0.0 <= zero_share <= 1.0:
        raise ValueError("zero_share must be within [0, 1]")

    rng = random.Random(seed)
    table: Table = [["", ""] + [f"M{m + 1}" for m in range(machines)]]
    for j in range(jobs):
        for o in range(operations):
            durations = [
                0 if rng.random() < zero_share else rng.randint(1, max_duration)
                for _ in range(machines)
            ]
            table.append([f"J{j + 1}" if o == 0 else "", f"O{o + 1}"] + durations)
    return table
