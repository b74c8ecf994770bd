import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.text import normalize  # noqa: E402
from app.normalize.utils import contains_token, is_bullet_like, strip_bullet_prefix  # noqa: E402


class NormalizationTests(unittest.TestCase):
    def test_markup_fragments_become_lines(self):
        raw = "<p>Jane Doe</p><br>jane@x.com<div><b>EXPERIENCE</b></div>"
        self.assertEqual(normalize(raw), "Jane Doe\njane@x.com\nEXPERIENCE")

    def test_line_endings_whitespace_and_blank_rows(self):
        raw = "Line one\r\nLine   two\rLine three\n\n   \n  Line\tfour  "
        self.assertEqual(normalize(raw), "Line one\nLine two\nLine three\nLine four")

    def test_digit_only_rows_are_dropped(self):
        raw = "Jane Doe\n1\n2\nSales Manager\n2019-2022"
        self.assertEqual(normalize(raw), "Jane Doe\nSales Manager\n2019-2022")

    def test_non_breaking_space_entities_are_collapsed(self):
        self.assertEqual(normalize("a &nbsp;&nbsp;b<br/>c"), "a b\nc")

    def test_normalize_is_idempotent(self):
        samples = [
            "<p>Jane&nbsp;Doe</p>\r\n\r\n<<b>p>Summary</p>\n42\n  - Did   things ",
            "Plain text\nwith two lines",
            "",
            "<br><br><br>",
        ]
        for raw in samples:
            once = normalize(raw)
            self.assertEqual(normalize(once), once, raw)

    def test_empty_input(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize("\n\n  \r\n"), "")

    def test_bullet_helpers(self):
        self.assertTrue(is_bullet_like("- Grew revenue 20%"))
        self.assertTrue(is_bullet_like("• Led a team"))
        self.assertFalse(is_bullet_like("-2019"))
        self.assertFalse(is_bullet_like("Sales Manager"))
        self.assertEqual(strip_bullet_prefix("•   Led a team"), "Led a team")

    def test_contains_token_matches_whole_words(self):
        self.assertTrue(contains_token("Senior Sales Manager", ("manager",)))
        self.assertFalse(contains_token("Management trainee", ("manager",)))
        self.assertTrue(contains_token("Head of Operations", ("head of",)))
        self.assertFalse(contains_token("Headquarters", ("head of",)))


if __name__ == "__main__":
    unittest.main()
