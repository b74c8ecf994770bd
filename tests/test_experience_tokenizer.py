import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.experience import LineKind, classify_line, split_dates, split_header, tokenize_experience  # noqa: E402
from app.normalize.patterns import HeuristicConfig  # noqa: E402


class ClassifyLineTests(unittest.TestCase):
    def setUp(self):
        self.heuristics = HeuristicConfig()

    def test_priority_order(self):
        self.assertIs(classify_line("2019-2022", self.heuristics), LineKind.DATE)
        self.assertIs(classify_line("- 2019 - 2021", self.heuristics), LineKind.DATE)
        self.assertIs(classify_line("- Led a team of 5 engineers", self.heuristics), LineKind.BULLET)
        self.assertIs(classify_line("Operations Manager", self.heuristics), LineKind.ROLE)
        self.assertIs(classify_line("Responsible for the team.", self.heuristics), LineKind.TEXT)

    def test_long_lines_with_years_are_not_date_lines(self):
        line = "Joined in 2019 and took over the regional accounts portfolio"
        self.assertIsNot(classify_line(line, self.heuristics), LineKind.DATE)

    def test_extra_role_keywords(self):
        heuristics = HeuristicConfig(role_keywords=("barista",))
        self.assertIs(classify_line("Senior Barista", heuristics), LineKind.ROLE)
        self.assertIs(classify_line("Senior Barista", self.heuristics), LineKind.TEXT)

    def test_narrative_year_lines_are_not_date_lines(self):
        self.assertIs(classify_line("Promoted in 2021", self.heuristics), LineKind.TEXT)
        self.assertIs(classify_line("Since 2021", self.heuristics), LineKind.TEXT)
        self.assertIs(classify_line("2021", self.heuristics), LineKind.DATE)
        self.assertIs(classify_line("Analyst, Acme 2021", self.heuristics), LineKind.DATE)


class SplitHelpersTests(unittest.TestCase):
    def test_split_dates_returns_remainder(self):
        self.assertEqual(split_dates("Marketing Assistant (2018 - 2020)"), ("2018", "2020", "Marketing Assistant"))
        self.assertEqual(split_dates("Jan 2020 - Present"), ("Jan 2020", "Present", ""))
        self.assertEqual(split_dates("Since 2021"), ("2021", "", "Since"))

    def test_split_header_variants(self):
        self.assertEqual(
            split_header("Account Manager | Contoso, Manchester"),
            ("Account Manager", "Contoso", "Manchester"),
        )
        self.assertEqual(split_header("Account Manager, Contoso"), ("Account Manager", "Contoso", ""))
        self.assertEqual(split_header("Account Manager"), ("Account Manager", "", ""))
        self.assertEqual(split_header(""), ("", "", ""))


class TokenizeExperienceTests(unittest.TestCase):
    def test_title_then_dates_is_one_entry(self):
        entries = tokenize_experience("Sales Manager\n2019-2022\n- Grew revenue 20%")

        self.assertEqual(len(entries), 1)
        entry = entries[0]
        self.assertIn("Sales Manager", entry.title)
        self.assertEqual((entry.start, entry.end), ("2019", "2022"))
        self.assertEqual(entry.bullets, ["Grew revenue 20%"])

    def test_multiple_roles(self):
        text = (
            "Senior Data Analyst — Acme Ltd, London\n"
            "Jan 2020 - Present\n"
            "- Built dashboards\n"
            "- Cut reporting time\n"
            "Junior Analyst — Beta Co\n"
            "2017 – 2019\n"
            "- Cleaned data"
        )
        entries = tokenize_experience(text)

        self.assertEqual(len(entries), 2)
        first, second = entries
        self.assertEqual(first.title, "Senior Data Analyst")
        self.assertEqual(first.company, "Acme Ltd")
        self.assertEqual(first.location, "London")
        self.assertEqual((first.start, first.end), ("Jan 2020", "Present"))
        self.assertEqual(first.bullets, ["Built dashboards", "Cut reporting time"])
        self.assertEqual(second.title, "Junior Analyst")
        self.assertEqual(second.company, "Beta Co")
        self.assertEqual((second.start, second.end), ("2017", "2019"))
        self.assertEqual(second.bullets, ["Cleaned data"])

    def test_company_line_after_title(self):
        entries = tokenize_experience("Sales Manager\nAcme Retail Group\n2019 - 2022\n- Grew revenue")

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].company, "Acme Retail Group")
        self.assertEqual(entries[0].bullets, ["Grew revenue"])

    def test_consecutive_date_lines_open_new_entries(self):
        entries = tokenize_experience("2020 - 2022\n- Ran the store\n2018 - 2020\n- Stocked shelves")

        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0].bullets, ["Ran the store"])
        self.assertEqual(entries[1].start, "2018")

    def test_one_line_headers_with_inline_dates(self):
        text = (
            "Sales Manager - Acme Ltd, London (Jan 2019 - Present)\n"
            "- Grew revenue\n"
            "Account Executive - Beta Co, Leeds (2016 - 2018)\n"
            "- Won accounts"
        )
        entries = tokenize_experience(text)

        self.assertEqual(len(entries), 2)
        first, second = entries
        self.assertEqual((first.title, first.company, first.location), ("Sales Manager", "Acme Ltd", "London"))
        self.assertEqual((first.start, first.end), ("Jan 2019", "Present"))
        self.assertEqual(first.bullets, ["Grew revenue"])
        self.assertEqual((second.title, second.company, second.location), ("Account Executive", "Beta Co", "Leeds"))
        self.assertEqual((second.start, second.end), ("2016", "2018"))
        self.assertEqual(second.bullets, ["Won accounts"])

    def test_narrative_year_line_stays_a_bullet(self):
        entries = tokenize_experience("Sales Manager\n2019 - 2022\n- Grew revenue\nPromoted in 2021")

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].title, "Sales Manager")
        self.assertEqual((entries[0].start, entries[0].end), ("2019", "2022"))
        self.assertEqual(entries[0].bullets, ["Grew revenue", "Promoted in 2021"])

    def test_narrative_year_line_alone_yields_nothing(self):
        self.assertEqual(tokenize_experience("Since 2021"), [])

    def test_no_role_markers_yields_nothing(self):
        text = "Enjoys hiking and reading.\nVolunteered at the local library."
        self.assertEqual(tokenize_experience(text), [])

    def test_bullets_before_any_entry_are_dropped(self):
        entries = tokenize_experience("- orphan bullet\nSales Manager\n- Grew revenue")
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].bullets, ["Grew revenue"])

    def test_empty_input(self):
        self.assertEqual(tokenize_experience(""), [])


if __name__ == "__main__":
    unittest.main()
