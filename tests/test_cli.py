import io
import json
import logging
import tempfile
import unittest
from contextlib import redirect_stdout
from datetime import date
from pathlib import Path

import main as cli
from newsmini.utils.logger import parse_level


class LoggerTests(unittest.TestCase):
    def test_parse_level(self) -> None:
        self.assertEqual(parse_level("debug"), logging.DEBUG)
        self.assertEqual(parse_level(logging.ERROR), logging.ERROR)
        self.assertEqual(parse_level("nonsense"), logging.INFO)
        self.assertEqual(parse_level(None), logging.INFO)


class MainTests(unittest.TestCase):
    def test_offline_run_writes_puzzle(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = io.StringIO()
            with redirect_stdout(out):
                code = cli.main(
                    ["--offline", "--template", "stripes", "--output-dir", tmpdir, "--log-level", "WARNING"]
                )
            self.assertEqual(code, 0)
            path = Path(tmpdir) / f"{date.today().isoformat()}.json"
            self.assertEqual(out.getvalue().strip(), str(path))
            payload = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(payload["grid"][:5], list("RIVER"))

    def test_words_file_feeds_selector(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            words = Path(tmpdir) / "words.txt"
            words.write_text("# today\nplant\n\ncrowd\ntrain\n", encoding="utf-8")
            out = io.StringIO()
            with redirect_stdout(out):
                code = cli.main(
                    [
                        "--offline", "--template", "stripes", "--words-file", str(words),
                        "--output-dir", tmpdir, "--print", "--log-level", "WARNING",
                    ]
                )
            self.assertEqual(code, 0)
            self.assertIn(" P  L  A  N  T", out.getvalue())
            self.assertEqual(cli.parse_words_file(words), ["plant", "crowd", "train"])


if __name__ == "__main__":
    unittest.main()
