"""Core entities of a job-shop work unit.

This module defines:
    Machine     -- a resource that at most one action may hold at a time.
    Job         -- ordered sequence of operations (order = precedence).
    Operation   -- a step of a job with its candidate machine assignments.
    Action      -- one candidate (machine, start, duration, end) assignment.
    ActionState -- life cycle of an action during simulation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class MachineStateError(RuntimeError):
    """Raised when a machine is occupied twice or released while free."""


class ActionState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(eq=False)
class Machine:
    """Processing resource.

    Attributes:
        name: Machine name taken from the table header.
        occupied: True while some action holds the machine.
        current_action: The action holding the machine (not owned by it).
    """

    name: str
    occupied: bool = False
    current_action: Optional["Action"] = field(default=None, repr=False)

    def is_occupied(self) -> bool:
        return self.occupied

    def occupy(self, action: "Action") -> None:
        if self.occupied:
            raise MachineStateError(f"Machine {self.name} is already occupied")
        self.occupied = True
        self.current_action = action

    def release(self) -> None:
        if not self.occupied:
            raise MachineStateError(f"Machine {self.name} is not occupied")
        self.occupied = False
        self.current_action = None

    def __str__(self) -> str:
        return self.name


@dataclass(eq=False)
class Action:
    """Candidate assignment of an operation to one machine.

    ``done`` flips from False to True exactly once (state COMPLETED) and is
    never reverted during a simulation; only ``reset`` brings it back.
    """

    machine: Machine
    operation: "Operation" = field(repr=False)
    duration: int
    start: int = 0
    end: int = 0
    state: ActionState = ActionState.PENDING

    @property
    def done(self) -> bool:
        return self.state is ActionState.COMPLETED

    def is_done(self) -> bool:
        return self.done

    def schedule(self, start: int) -> None:
        self.start = start
        self.end = start + self.duration

    def begin(self) -> None:
        """Claim the machine: PENDING -> RUNNING."""
        self.machine.occupy(self)
        self.state = ActionState.RUNNING

    def complete(self) -> None:
        """Finish on the machine and free it, whoever was holding it."""
        self.state = ActionState.COMPLETED
        self.machine.release()

    def holds_machine(self) -> bool:
        return self.machine.current_action is self

    def reset(self) -> None:
        self.state = ActionState.PENDING

    def __str__(self) -> str:
        return (
            f"Action(machine={self.machine.name}, start={self.start}, "
            f"duration={self.duration}, end={self.end}, done={self.done})"
        )


@dataclass(eq=False)
class Operation:
    """Single step of a job.

    Attributes:
        name: Operation name from the table.
        job: Owning job (back-reference).
        previous: Preceding operation of the same job, None for the first one.
        actions: Candidate actions, one per machine in header order.
    """

    name: str
    job: "Job" = field(repr=False)
    previous: Optional["Operation"] = field(default=None, repr=False)
    actions: list[Action] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return any(action.done for action in self.actions)

    def is_done(self) -> bool:
        return self.done

    def get_active_action(self) -> Optional[Action]:
        """Return the action that ran this operation.

        The completed action wins; before completion the first candidate
        that started is reported, even if another action's end has since
        freed its machine. Ties follow candidate order.
        """
        running = None
        for action in self.actions:
            if action.state is ActionState.COMPLETED:
                return action
            if running is None and action.state is ActionState.RUNNING:
                running = action
        return running

    def __str__(self) -> str:
        return f"Operation {self.name}"


@dataclass(eq=False)
class Job:
    name: str
    operations: list[Operation] = field(default_factory=list)

    def add_operation(self, name: str) -> Operation:
        previous = self.operations[-1] if self.operations else None
        operation = Operation(name=name, job=self, previous=previous)
        self.operations.append(operation)
        return operation

    def __str__(self) -> str:
        return f"Job {self.name}"
