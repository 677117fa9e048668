import unittest

from newsmini.core.exceptions import GridIncompleteError, SlotPlacementError
from newsmini.engine.grid import FillGrid
from newsmini.engine.numbering import resolve_slots
from newsmini.engine.template import MINI, STRIPES
from newsmini.engine.validator import GridValidator


def slot_by_key(template, key):
    return next(slot for slot in resolve_slots(template) if slot.key == key)


class FillGridTests(unittest.TestCase):
    def test_place_word_rejects_clash(self) -> None:
        grid = FillGrid(MINI)
        grid.place_word(slot_by_key(MINI, "1-ACROSS"), "RIVER")
        with self.assertRaises(SlotPlacementError):
            grid.place_word(slot_by_key(MINI, "1-DOWN"), "STORM")

    def test_overwrite_reports_clashing_cells(self) -> None:
        grid = FillGrid(MINI)
        grid.place_word(slot_by_key(MINI, "1-ACROSS"), "RIVER")
        clashes = grid.place_word(slot_by_key(MINI, "1-DOWN"), "STORM", overwrite=True)
        self.assertEqual(clashes, [0])
        self.assertEqual(grid.letter(0), "S")

    def test_undo_keeps_shared_cells(self) -> None:
        grid = FillGrid(MINI)
        across = slot_by_key(MINI, "1-ACROSS")
        down = slot_by_key(MINI, "1-DOWN")
        grid.place_word(across, "RIVER")
        undo = grid.place_word_undoable(down, "RADIO")
        self.assertEqual(grid.letter(5), "A")
        undo()
        self.assertEqual(grid.letter(0), "R")
        self.assertIsNone(grid.letter(5))
        self.assertNotIn("RADIO", grid.used_words)

    def test_can_place_refuses_reused_word(self) -> None:
        grid = FillGrid(STRIPES)
        slots = resolve_slots(STRIPES)
        grid.place_word(slots[0], "RADIO")
        self.assertFalse(grid.can_place(slots[1], "RADIO"))
        self.assertTrue(grid.can_place(slots[1], "STORM"))

    def test_to_flat_marks_blocked_cells(self) -> None:
        grid = FillGrid(STRIPES)
        flat = grid.to_flat()
        self.assertEqual(len(flat), 25)
        self.assertEqual(flat[5:10], ["#"] * 5)
        self.assertEqual(flat[0], "")
        self.assertEqual(grid.fill_empty("A"), 15)
        self.assertTrue(grid.is_complete())


class ValidatorTests(unittest.TestCase):
    def test_incomplete_grid_is_fatal(self) -> None:
        grid = FillGrid(STRIPES)
        with self.assertRaises(GridIncompleteError):
            GridValidator().ensure_complete(STRIPES, grid.to_flat())

    def test_duplicates_are_reported(self) -> None:
        grid = FillGrid(STRIPES)
        slots = resolve_slots(STRIPES)
        for slot in slots:
            grid.place_word(slot, "RADIO", overwrite=True)
        result = GridValidator().validate(STRIPES, grid.to_flat(), slots, grid.assignments)
        self.assertFalse(result.ok)
        self.assertTrue(any("Duplicate" in message for message in result.messages))

    def test_clean_grid_passes(self) -> None:
        grid = FillGrid(STRIPES)
        slots = resolve_slots(STRIPES)
        for slot, word in zip(slots, ["RADIO", "STORM", "RIVER"]):
            grid.place_word(slot, word)
        result = GridValidator().validate(STRIPES, grid.to_flat(), slots, grid.assignments)
        self.assertTrue(result.ok)
        self.assertEqual(result.messages, [])


if __name__ == "__main__":
    unittest.main()
