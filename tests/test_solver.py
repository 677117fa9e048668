import unittest

from newsmini.core.constants import SolveStatus
from newsmini.engine.grid import FillGrid
from newsmini.engine.numbering import resolve_slots
from newsmini.engine.solver import (
    BacktrackingSolver,
    CpSatSolver,
    SolverConfig,
    group_by_length,
    solve_slots,
)
from newsmini.engine.template import GridTemplate


TWO_ROWS = GridTemplate.from_rows(
    "two-rows",
    [".....", "#####", ".....", "#####", "#####"],
)

# 3x3 ring in the top-left corner: 1-ACROSS, 6-ACROSS, 1-DOWN, 3-DOWN.
RING = GridTemplate.from_rows(
    "ring",
    ["...##", ".#.##", "...##", "#####", "#####"],
)

RING_WORDS = ["BAT", "SUN", "SIP", "BUS", "TOP", "TAX"]


def read(grid, slot):
    return "".join(grid.letters[index] for index in slot.cells)


class GroupingTests(unittest.TestCase):
    def test_group_by_length_keeps_rank_and_drops_repeats(self) -> None:
        grouped = group_by_length(["RADIO", "CITY", "STORM", "RADIO", ""])
        self.assertEqual(grouped, {5: ["RADIO", "STORM"], 4: ["CITY"]})


class BacktrackingTests(unittest.TestCase):
    def test_two_independent_rows(self) -> None:
        grid = FillGrid(TWO_ROWS)
        slots = resolve_slots(TWO_ROWS)
        result = BacktrackingSolver().solve(grid, slots, ["RADIO", "STORM"])
        self.assertTrue(result.solved)
        self.assertEqual(result.assignments, {"1-ACROSS": "RADIO", "6-ACROSS": "STORM"})

    def test_crossing_letters_agree(self) -> None:
        grid = FillGrid(RING)
        slots = resolve_slots(RING)
        result = BacktrackingSolver().solve(grid, slots, RING_WORDS)
        self.assertEqual(result.status, SolveStatus.SOLVED)
        self.assertEqual(
            result.assignments,
            {"1-ACROSS": "BAT", "6-ACROSS": "SIP", "1-DOWN": "BUS", "3-DOWN": "TOP"},
        )
        for slot in slots:
            self.assertEqual(read(grid, slot), result.assignments[slot.key])
        self.assertEqual(len(set(result.assignments.values())), len(slots))

    def test_forward_checking_does_not_change_solution(self) -> None:
        slots = resolve_slots(RING)
        pruned = BacktrackingSolver(SolverConfig(forward_check=True)).solve(
            FillGrid(RING), slots, RING_WORDS
        )
        plain = BacktrackingSolver(SolverConfig(forward_check=False)).solve(
            FillGrid(RING), slots, RING_WORDS
        )
        self.assertEqual(pruned.assignments, plain.assignments)
        self.assertLessEqual(pruned.steps, plain.steps)

    def test_words_are_not_reused(self) -> None:
        grid = FillGrid(TWO_ROWS)
        result = BacktrackingSolver().solve(grid, resolve_slots(TWO_ROWS), ["RADIO"])
        self.assertEqual(result.status, SolveStatus.UNSATISFIABLE)

    def test_missing_length_is_unsatisfiable(self) -> None:
        grid = FillGrid(RING)
        result = BacktrackingSolver().solve(grid, resolve_slots(RING), ["RADIO", "STORM"])
        self.assertEqual(result.status, SolveStatus.UNSATISFIABLE)
        self.assertEqual(result.steps, 0)

    def test_failed_search_leaves_grid_empty(self) -> None:
        grid = FillGrid(RING)
        result = BacktrackingSolver().solve(grid, resolve_slots(RING), ["BAT", "SIP", "BUS"])
        self.assertEqual(result.status, SolveStatus.UNSATISFIABLE)
        self.assertTrue(all(letter is None for letter in grid.letters))

    def test_depth_guard_exhausts(self) -> None:
        grid = FillGrid(TWO_ROWS)
        solver = BacktrackingSolver(SolverConfig(max_depth=1))
        result = solver.solve(grid, resolve_slots(TWO_ROWS), ["RADIO", "STORM"])
        self.assertEqual(result.status, SolveStatus.EXHAUSTED)

    def test_step_budget_exhausts(self) -> None:
        grid = FillGrid(TWO_ROWS)
        solver = BacktrackingSolver(SolverConfig(max_steps=1))
        result = solver.solve(grid, resolve_slots(TWO_ROWS), ["RADIO", "STORM"])
        self.assertEqual(result.status, SolveStatus.EXHAUSTED)
        self.assertEqual(result.steps, 1)


class CpSatTests(unittest.TestCase):
    def test_cpsat_fills_ring(self) -> None:
        grid = FillGrid(RING)
        slots = resolve_slots(RING)
        result = CpSatSolver().solve(grid, slots, RING_WORDS)
        self.assertTrue(result.solved)
        self.assertEqual(result.engine, "cpsat")
        for slot in slots:
            self.assertEqual(read(grid, slot), result.assignments[slot.key])
        self.assertEqual(len(set(result.assignments.values())), len(slots))

    def test_cpsat_reports_infeasible(self) -> None:
        grid = FillGrid(TWO_ROWS)
        result = CpSatSolver().solve(grid, resolve_slots(TWO_ROWS), ["RADIO"])
        self.assertEqual(result.status, SolveStatus.UNSATISFIABLE)

    def test_escalates_only_when_exhausted(self) -> None:
        slots = resolve_slots(TWO_ROWS)
        escalated = solve_slots(
            FillGrid(TWO_ROWS), slots, ["RADIO", "STORM"], SolverConfig(max_depth=1)
        )
        self.assertTrue(escalated.solved)
        self.assertEqual(escalated.engine, "cpsat")
        self.assertEqual(set(escalated.assignments.values()), {"RADIO", "STORM"})

        plain = solve_slots(FillGrid(TWO_ROWS), slots, ["RADIO", "STORM"])
        self.assertEqual(plain.engine, "backtracking")

        unsat = solve_slots(FillGrid(TWO_ROWS), slots, ["RADIO"], SolverConfig())
        self.assertEqual(unsat.status, SolveStatus.UNSATISFIABLE)
        self.assertEqual(unsat.engine, "backtracking")

    def test_escalation_can_be_disabled(self) -> None:
        result = solve_slots(
            FillGrid(TWO_ROWS),
            resolve_slots(TWO_ROWS),
            ["RADIO", "STORM"],
            SolverConfig(max_depth=1, escalate_to_cpsat=False),
        )
        self.assertEqual(result.status, SolveStatus.EXHAUSTED)


if __name__ == "__main__":
    unittest.main()
