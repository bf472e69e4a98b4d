"""Discrete-time evaluation of job-shop candidate schedules.

Exports the entity model, the work unit simulator and table loading.
"""

from gamus.models import Action, ActionState, Job, Machine, MachineStateError, Operation  # noqa: F401
from gamus.parser import MalformedInputError, load_table, validate_table  # noqa: F401
from gamus.work_unit import SimulationProblems, WorkUnit  # noqa: F401

__all__ = [
    "Action",
    "ActionState",
    "Job",
    "Machine",
    "MachineStateError",
    "MalformedInputError",
    "Operation",
    "SimulationProblems",
    "WorkUnit",
    "load_table",
    "validate_table",
]
