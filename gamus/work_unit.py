"""Work unit: entity graph of one problem plus the discrete-time simulator.

A ``WorkUnit`` is loaded from a problem table (see ``gamus.parser``), gets
start times either at random (``adjust_random_times``) or from an external
caller (``set_start_times``) and is then simulated tick by tick. The
simulation does not fail on infeasible timing; it counts two kinds of
problems instead:

    start_collisions  an action wanted to start on an occupied machine
    orphan_ends       an action reached its end while its machine was free

One WorkUnit must not be simulated from two threads at once; evaluate
candidates in parallel on independently loaded instances.
"""

from __future__ import annotations

import logging
import random
from typing import Any, NamedTuple, Optional, Sequence

from .models import Action, Job, Machine
from .parser import FIRST_MACHINE_COLUMN, is_blank, validate_table

logger = logging.getLogger("gamus.work_unit")


class SimulationProblems(NamedTuple):
    start_collisions: int
    orphan_ends: int


class WorkUnit:
    """Single work unit consisting of jobs, machines and candidate actions."""

    def __init__(
        self,
        data: Optional[Sequence[Sequence[Any]]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.data = data
        self.rng = rng if rng is not None else random.Random()
        self.machines: list[Machine] = []
        self.jobs: list[Job] = []
        # flat index over actions owned by operations; rebuilt by load()
        self.actions: list[Action] = []

    def load(self, data: Optional[Sequence[Sequence[Any]]] = None) -> None:
        """Build machines, jobs, operations and actions from the table.

        Any previous content is discarded. Actions are created job by job,
        operation by operation and machine by machine; that order is the
        scan order of ``simulate``.

        Raises:
            MalformedInputError: If the table breaks the layout contract.
            ValueError: If no table was given here or to the constructor.
        """
        if data is not None:
            self.data = data
        if self.data is None:
            raise ValueError("No problem table to load")
        table = self.data
        validate_table(table)

        self.machines.clear()
        self.jobs.clear()
        self.actions.clear()

        header = table[0]
        for j in range(FIRST_MACHINE_COLUMN, len(header)):
            self.machines.append(Machine(str(header[j]).strip()))

        job: Optional[Job] = None
        for row in table[1:]:
            # blank or repeated job name continues the current job
            name = "" if is_blank(row[0]) else str(row[0]).strip()
            if name and (job is None or name != job.name):
                job = Job(name)
                self.jobs.append(job)
            operation = job.add_operation(str(row[1]).strip())
            for j, machine in enumerate(self.machines, start=FIRST_MACHINE_COLUMN):
                action = Action(machine=machine, operation=operation, duration=int(row[j]))
                operation.actions.append(action)
                self.actions.append(action)

        logger.debug(
            "Loaded %d machines, %d jobs, %d operations, %d actions",
            len(self.machines),
            len(self.jobs),
            self.number_of_operations(),
            len(self.actions),
        )

    def adjust_random_times(self, min_start: int, max_start: int) -> None:
        """Draw every action's start uniformly from ``[min_start, max_start]``.

        ``end`` is derived as ``start + duration``.
        """
        if max_start < min_start:
            raise ValueError(f"max_start {max_start} is lower than min_start {min_start}")
        for job in self.jobs:
            for operation in job.operations:
                for action in operation.actions:
                    action.schedule(self.rng.randint(min_start, max_start))

    def set_start_times(self, starts: Sequence[int]) -> None:
        """Assign externally chosen start times in flat action order."""
        if len(starts) != len(self.actions):
            raise ValueError(f"Expected {len(self.actions)} start times, got {len(starts)}")
        for action, start in zip(self.actions, starts):
            action.schedule(int(start))

    def start_times(self) -> list[int]:
        return [action.start for action in self.actions]

    def reset(self) -> None:
        """Return all actions to pending and free all machines; keep timing."""
        for action in self.actions:
            action.reset()
        for machine in self.machines:
            if machine.is_occupied():
                machine.release()

    def simulate(self, limit: int) -> SimulationProblems:
        """Run the tick loop for ``limit`` discrete time steps.

        Each tick scans the flat action list. Actions of finished operations
        and of operations whose predecessor is unfinished are skipped. An
        action whose start tick arrives claims its machine, or counts a start
        collision when the machine is held. An action whose end tick arrives
        completes if its machine is held by anyone and frees it, or counts an
        orphan end otherwise. Both checks run for the same action in the same
        tick. There is no early exit.

        Returns:
            ``SimulationProblems(start_collisions, orphan_ends)``.
        """
        start_collisions = 0
        orphan_ends = 0

        for time in range(limit):
            for action in self.actions:
                operation = action.operation
                if operation.is_done():
                    continue

                previous = operation.previous
                if previous is not None and not previous.is_done():
                    continue

                if action.start == time and action.duration > 0 and not action.done:
                    if not action.machine.is_occupied():
                        action.begin()
                    else:
                        start_collisions += 1

                if action.end == time:
                    if action.machine.is_occupied():
                        action.complete()
                    else:
                        orphan_ends += 1

        logger.debug(
            "Simulated %d ticks: start_collisions=%d orphan_ends=%d",
            limit,
            start_collisions,
            orphan_ends,
        )
        return SimulationProblems(start_collisions, orphan_ends)

    def number_of_operations(self) -> int:
        return sum(len(job.operations) for job in self.jobs)

    def number_of_undone_operations(self) -> int:
        counter = 0
        for job in self.jobs:
            for operation in job.operations:
                if not operation.is_done():
                    counter += 1
        return counter

    def total_time_used(self) -> int:
        """Latest end among completed actions (0 when nothing completed)."""
        return max((action.end for action in self.actions if action.done), default=0)

    def report(self) -> str:
        lines = []
        for job in self.jobs:
            lines.append(str(job))
            for operation in job.operations:
                lines.append(f"\t{operation}")
                lines.append(f"\t\t{operation.get_active_action()}")
        return "".join(line + "\n" for line in lines)
