"""Slot filling: depth-first backtracking with an optional CP-SAT escalation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ortools.sat.python import cp_model

from ..core.constants import SolveStatus
from ..core.models import Slot
from ..utils.logger import get_logger
from .grid import FillGrid
from .numbering import crossings


LOGGER = get_logger(__name__)


@dataclass
class SolverConfig:
    """Limits for the constraint search."""

    max_depth: int = 12
    max_steps: int = 20_000
    forward_check: bool = True
    escalate_to_cpsat: bool = True
    cpsat_timeout: float = 10.0
    cpsat_workers: int = 4


@dataclass
class SolveResult:
    status: SolveStatus
    assignments: Dict[str, str] = field(default_factory=dict)
    steps: int = 0
    engine: str = "backtracking"

    @property
    def solved(self) -> bool:
        return self.status == SolveStatus.SOLVED


def group_by_length(words: Iterable[str]) -> Dict[int, List[str]]:
    """Group words by length, keeping ranked order and dropping repeats."""

    grouped: Dict[int, List[str]] = {}
    seen = set()
    for word in words:
        if not word or word in seen:
            continue
        seen.add(word)
        grouped.setdefault(len(word), []).append(word)
    return grouped


class BacktrackingSolver:
    """Assigns one ranked word per slot, honouring crossings and uniqueness.

    Slots are visited in the order given. Each slot tries words of its length
    in ranked order; a word is placeable when it is unused and agrees with
    every letter already in its cells. The search stops with EXHAUSTED when
    the slot count exceeds ``max_depth`` or more than ``max_steps``
    placements were tried, and with UNSATISFIABLE when every branch failed.
    """

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config or SolverConfig()
        self._steps = 0
        self._exhausted = False

    def solve(self, grid: FillGrid, slots: Sequence[Slot], words: Iterable[str]) -> SolveResult:
        self._steps = 0
        self._exhausted = False
        if not slots:
            return SolveResult(status=SolveStatus.SOLVED)

        depth_limit = min(len(slots), self.config.max_depth)
        if len(slots) > depth_limit:
            LOGGER.warning(
                "Backtracking: %d slots exceed depth guard %d", len(slots), self.config.max_depth
            )
            return SolveResult(status=SolveStatus.EXHAUSTED)

        by_length = group_by_length(words)
        missing = sorted({slot.length for slot in slots if not by_length.get(slot.length)})
        if missing:
            LOGGER.info("Backtracking: no candidates of length %s", missing)
            return SolveResult(status=SolveStatus.UNSATISFIABLE)

        slot_by_key = {slot.key: slot for slot in slots}
        crossing_map = crossings(slots)
        found = self._fill(grid, list(slots), by_length, 0, slot_by_key, crossing_map)

        if found:
            LOGGER.info("Backtracking: solved %d slots in %d steps", len(slots), self._steps)
            return SolveResult(
                status=SolveStatus.SOLVED,
                assignments={slot.key: grid.assignments[slot.key] for slot in slots},
                steps=self._steps,
            )
        status = SolveStatus.EXHAUSTED if self._exhausted else SolveStatus.UNSATISFIABLE
        LOGGER.info("Backtracking: %s after %d steps", status.value.lower(), self._steps)
        return SolveResult(status=status, steps=self._steps)

    def _fill(
        self,
        grid: FillGrid,
        slots: List[Slot],
        by_length: Dict[int, List[str]],
        depth: int,
        slot_by_key: Dict[str, Slot],
        crossing_map: Dict[str, list],
    ) -> bool:
        if depth >= len(slots):
            return True

        slot = slots[depth]
        for word in by_length.get(slot.length, ()):
            if self._steps >= self.config.max_steps:
                self._exhausted = True
                return False
            if not grid.can_place(slot, word):
                continue
            self._steps += 1
            undo = grid.place_word_undoable(slot, word)
            viable = not self.config.forward_check or self._crossings_viable(
                grid, slot, by_length, slot_by_key, crossing_map
            )
            if viable and self._fill(grid, slots, by_length, depth + 1, slot_by_key, crossing_map):
                return True
            undo()
            if self._exhausted:
                return False
        return False

    @staticmethod
    def _crossings_viable(
        grid: FillGrid,
        slot: Slot,
        by_length: Dict[int, List[str]],
        slot_by_key: Dict[str, Slot],
        crossing_map: Dict[str, list],
    ) -> bool:
        """Every unfilled slot crossing ``slot`` must keep a placeable word."""

        for _, other_key, _ in crossing_map.get(slot.key, ()):
            if other_key in grid.assignments:
                continue
            other = slot_by_key[other_key]
            if not any(grid.can_place(other, word) for word in by_length.get(other.length, ())):
                return False
        return True


class CpSatSolver:
    """Whole-grid assignment via CP-SAT, preferring higher-ranked words.

    One boolean per (slot, word) choice; a chosen word pins the letters of
    its cells, each word is used at most once, and the objective sums the
    rank of every chosen word.
    """

    def __init__(self, config: Optional[SolverConfig] = None) -> None:
        self.config = config or SolverConfig()

    def solve(self, grid: FillGrid, slots: Sequence[Slot], words: Iterable[str]) -> SolveResult:
        if not slots:
            return SolveResult(status=SolveStatus.SOLVED, engine="cpsat")

        by_length = group_by_length(words)
        model = cp_model.CpModel()

        cell_vars: Dict[int, cp_model.IntVar] = {}
        for slot in slots:
            for index in slot.cells:
                if index not in cell_vars:
                    cell_vars[index] = model.new_int_var(0, 25, f"L_{index}")

        choices: Dict[str, Dict[str, cp_model.IntVar]] = {}
        usage: Dict[str, List[cp_model.IntVar]] = {}
        objective = []
        for slot in slots:
            candidates = by_length.get(slot.length, [])
            if not candidates:
                LOGGER.debug("CP-SAT: no candidates for slot %s", slot.key)
                return SolveResult(status=SolveStatus.UNSATISFIABLE, engine="cpsat")
            slot_choices: Dict[str, cp_model.IntVar] = {}
            for rank, word in enumerate(candidates):
                choice = model.new_bool_var(f"x_{slot.key}_{word}")
                for index, char in zip(slot.cells, word):
                    model.add(cell_vars[index] == ord(char) - ord("A")).only_enforce_if(choice)
                slot_choices[word] = choice
                usage.setdefault(word, []).append(choice)
                objective.append(rank * choice)
            model.add_exactly_one(list(slot_choices.values()))
            choices[slot.key] = slot_choices

        for word, chosen in usage.items():
            if len(chosen) > 1:
                model.add_at_most_one(chosen)

        model.minimize(sum(objective))

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.config.cpsat_timeout
        solver.parameters.num_workers = self.config.cpsat_workers

        LOGGER.info(
            "CP-SAT: %d slots, %d cell vars, solving (timeout=%0.1fs)...",
            len(slots), len(cell_vars), self.config.cpsat_timeout,
        )
        status = solver.solve(model)
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            LOGGER.warning("CP-SAT: no solution found (status=%s)", solver.status_name(status))
            if status == cp_model.INFEASIBLE:
                return SolveResult(status=SolveStatus.UNSATISFIABLE, engine="cpsat")
            return SolveResult(status=SolveStatus.EXHAUSTED, engine="cpsat")

        LOGGER.info("CP-SAT: solution found in %.2fs", solver.wall_time)
        assignments: Dict[str, str] = {}
        for slot in slots:
            for word, choice in choices[slot.key].items():
                if solver.value(choice):
                    assignments[slot.key] = word
                    break
        grid.clear()
        grid.apply(slots, assignments)
        return SolveResult(status=SolveStatus.SOLVED, assignments=assignments, engine="cpsat")


def solve_slots(
    grid: FillGrid,
    slots: Sequence[Slot],
    words: Sequence[str],
    config: Optional[SolverConfig] = None,
) -> SolveResult:
    """Backtracking first; CP-SAT only when backtracking ran out of budget."""

    config = config or SolverConfig()
    result = BacktrackingSolver(config).solve(grid, slots, words)
    if result.status != SolveStatus.EXHAUSTED or not config.escalate_to_cpsat:
        return result

    LOGGER.info("Backtracking exhausted; escalating to CP-SAT")
    grid.clear()
    escalated = CpSatSolver(config).solve(grid, slots, words)
    if escalated.solved:
        escalated.steps = result.steps
        return escalated
    return result
