import asyncio
import unittest

from newsmini.core.models import StoryRecord
from newsmini.data.normalization import contains_whole_word
from newsmini.engine.clues import (
    DEFAULT_CLUES,
    CallBudget,
    ClueAssembler,
    ClueConfig,
    HeuristicClueWriter,
    sanitize_clue,
)
from newsmini.engine.numbering import numbering_for
from newsmini.engine.template import MINI, STRIPES


def open_grid(template, letter="A"):
    return [letter if template.is_open(i) else "#" for i in range(25)]


class RecordingProvider:
    def __init__(self, fail=False, delay=0.0, reply=None, enabled=True):
        self.enabled = enabled
        self.fail = fail
        self.delay = delay
        self.reply = reply
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate(self, answer, source_title, source_url):
        self.calls.append((answer, source_title, source_url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if self.fail:
                raise RuntimeError("provider down")
            return self.reply or f"Provider clue {len(self.calls)}"
        finally:
            self.in_flight -= 1


class CallBudgetTests(unittest.TestCase):
    def test_budget_stops_at_limit(self) -> None:
        budget = CallBudget(2)
        self.assertTrue(budget.try_acquire())
        self.assertTrue(budget.try_acquire())
        self.assertFalse(budget.try_acquire())
        self.assertEqual(budget.remaining, 0)


class SanitizeTests(unittest.TestCase):
    def test_strips_quotes_newlines_and_final_punctuation(self) -> None:
        self.assertEqual(sanitize_clue('"Local radio\nstation."'), "Local radio station")

    def test_truncates(self) -> None:
        self.assertEqual(len(sanitize_clue("x" * 90, 60)), 60)
        self.assertEqual(sanitize_clue(None), "")


class HeuristicClueTests(unittest.TestCase):
    def test_blank_replaces_answer_in_story_sentence(self) -> None:
        writer = HeuristicClueWriter(
            [StoryRecord(title="Storm closes roads across the Triad", source="wfdd")]
        )
        self.assertEqual(writer.clue("STORM"), "___ closes roads across the Triad")

    def test_prefers_capitalized_phrase(self) -> None:
        writer = HeuristicClueWriter(
            [StoryRecord(title="Crews say the Yadkin River crested overnight after rain")]
        )
        clue = writer.clue("RIVER")
        self.assertIn("___", clue)
        self.assertNotIn("Yadkin", clue)

    def test_long_sentence_is_windowed_around_blank(self) -> None:
        summary = (
            "After weeks of planning and several public meetings held across the county, "
            "officials said the new library will open next spring."
        )
        writer = HeuristicClueWriter([StoryRecord(title="Update", summary=summary)])
        clue = writer.clue("LIBRARY")
        self.assertLessEqual(len(clue), 60)
        self.assertIn("___", clue)
        self.assertTrue(clue.startswith("..."))

    def test_curated_then_default(self) -> None:
        writer = HeuristicClueWriter([])
        self.assertEqual(writer.clue("RIVER"), "Flows through the Triad")
        self.assertEqual(writer.clue("QUIZ"), DEFAULT_CLUES[0])

    def test_never_contains_answer(self) -> None:
        writer = HeuristicClueWriter(
            [StoryRecord(title="News news everywhere", summary="More NEWS today.")],
            fallback_clues={"NEWS": "Today's news"},
        )
        for answer in ("NEWS", "TODAY", "COVERAGE", "WORD"):
            self.assertFalse(contains_whole_word(writer.clue(answer), answer), answer)


class ClueAssemblerTests(unittest.IsolatedAsyncioTestCase):
    async def test_budget_is_shared_across_then_down(self) -> None:
        provider = RecordingProvider()
        assembler = ClueAssembler(provider=provider)
        across, down = await assembler.assemble(open_grid(MINI), numbering_for(MINI))

        self.assertEqual(len(provider.calls), 8)
        self.assertEqual(sorted(across), [1, 7, 8, 10, 12])
        self.assertEqual(sorted(down), [1, 3, 4, 5, 9])
        self.assertTrue(all(text.startswith("Provider clue") for text in across.values()))
        self.assertTrue(down[1].startswith("Provider clue"))
        self.assertTrue(down[4].startswith("Provider clue"))
        self.assertEqual(down[5], DEFAULT_CLUES[0])
        self.assertEqual(down[9], DEFAULT_CLUES[0])

    async def test_at_most_two_calls_in_flight(self) -> None:
        provider = RecordingProvider()
        await ClueAssembler(provider=provider).assemble(open_grid(MINI), numbering_for(MINI))
        self.assertEqual(provider.max_in_flight, 2)

    async def test_disabled_provider_spends_nothing(self) -> None:
        provider = RecordingProvider(enabled=False)
        assembler = ClueAssembler(provider=provider)
        across, _ = await assembler.assemble(open_grid(STRIPES), numbering_for(STRIPES))
        self.assertEqual(provider.calls, [])
        self.assertEqual(assembler.budget.used, 0)
        self.assertEqual(len(across), 3)

    async def test_missing_provider_uses_heuristic_only(self) -> None:
        assembler = ClueAssembler()
        across, _ = await assembler.assemble(open_grid(STRIPES), numbering_for(STRIPES))
        self.assertEqual(assembler.budget.used, 0)
        self.assertEqual(len(across), 3)
        self.assertTrue(all(across.values()))
        entry = assembler.entries(open_grid(STRIPES), numbering_for(STRIPES))[0][0]
        self.assertIsNone(await assembler._call_provider(entry))

    async def test_failures_fall_back_to_heuristic(self) -> None:
        provider = RecordingProvider(fail=True)
        assembler = ClueAssembler(provider=provider)
        grid = list("RIVER#####RADIO#####STORM")
        across, down = await assembler.assemble(grid, numbering_for(STRIPES))

        self.assertEqual(down, {})
        self.assertEqual(across[1], "Flows through the Triad")
        self.assertEqual(across[2], "WFDD medium")
        self.assertEqual(across[3], "Thunder and lightning event")
        self.assertEqual(assembler.budget.used, 3)

    async def test_timeout_falls_back(self) -> None:
        provider = RecordingProvider(delay=1.0)
        assembler = ClueAssembler(provider=provider, config=ClueConfig(call_timeout=0.01))
        across, _ = await assembler.assemble(list("RIVER#####RADIO#####STORM"), numbering_for(STRIPES))
        self.assertEqual(across[1], "Flows through the Triad")

    async def test_revealing_clue_is_rejected(self) -> None:
        provider = RecordingProvider(reply="The river runs high")
        assembler = ClueAssembler(provider=provider)
        across, _ = await assembler.assemble(list("RIVER#####RADIO#####STORM"), numbering_for(STRIPES))
        self.assertEqual(across[1], "Flows through the Triad")
        self.assertEqual(across[2], "The river runs high")

    async def test_attribution_reaches_provider(self) -> None:
        provider = RecordingProvider()
        story = StoryRecord(title="Radio drive tops goal", link="https://www.wfdd.org/radio", source="wfdd")
        await ClueAssembler(provider=provider).assemble(
            list("RIVER#####RADIO#####STORM"), numbering_for(STRIPES), {"RADIO": story}
        )
        self.assertIn(("RADIO", "Radio drive tops goal", "https://www.wfdd.org/radio"), provider.calls)
        self.assertIn(("RIVER", "", ""), provider.calls)


if __name__ == "__main__":
    unittest.main()
