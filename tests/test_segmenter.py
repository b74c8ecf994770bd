import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.normalize.patterns import HeuristicConfig  # noqa: E402
from app.normalize.segmenter import SegmentState, heading_state, segment, transition  # noqa: E402
from app.normalize.text import normalize  # noqa: E402

SAMPLE_CV = (
    "Jane Doe\n"
    "jane@x.com\n"
    "EXPERIENCE\n"
    "Sales Manager\n"
    "2019-2022\n"
    "- Grew revenue 20%\n"
    "EDUCATION\n"
    "BSc Marketing, LeedsUni, 2018"
)


class HeadingTransitionTests(unittest.TestCase):
    def test_heading_variants_map_to_states(self):
        self.assertIs(heading_state("EXPERIENCE"), SegmentState.IN_EXPERIENCE)
        self.assertIs(heading_state("Work Experience:"), SegmentState.IN_EXPERIENCE)
        self.assertIs(heading_state("EDUCATION & TRAINING"), SegmentState.IN_EDUCATION)
        self.assertIs(heading_state("Professional Summary"), SegmentState.IN_SUMMARY)
        self.assertIs(heading_state("== Key Skills =="), SegmentState.IN_SKILLS)
        self.assertIs(heading_state("Projects"), SegmentState.IN_PROJECTS)
        self.assertIs(heading_state("Certifications"), SegmentState.IN_CERTIFICATIONS)

    def test_combined_headings_map_to_states(self):
        self.assertIs(heading_state("Education and Qualifications"), SegmentState.IN_EDUCATION)
        self.assertIs(heading_state("EDUCATION & QUALIFICATIONS"), SegmentState.IN_EDUCATION)
        self.assertIs(heading_state("Employment and Experience"), SegmentState.IN_EXPERIENCE)
        self.assertIs(heading_state("Work Experience & Achievements:"), SegmentState.IN_EXPERIENCE)
        self.assertIs(heading_state("Professional Background"), SegmentState.IN_EXPERIENCE)

    def test_combined_headings_split_sections(self):
        parsed = segment(
            "Jane Doe\n"
            "jane@x.com\n"
            "Work Experience & Achievements\n"
            "Sales Manager\n"
            "Education and Qualifications\n"
            "BSc Marketing, LeedsUni, 2018"
        )
        self.assertEqual(parsed.experience_text, "Sales Manager")
        self.assertEqual(parsed.education_text, "BSc Marketing, LeedsUni, 2018")
        self.assertEqual(parsed.preamble_text, "")

    def test_body_lines_are_not_headings(self):
        self.assertIsNone(heading_state("Managed the experience team"))
        self.assertIsNone(heading_state("Sales Manager"))
        self.assertIsNone(heading_state(""))

    def test_transition_consumes_heading_lines_only(self):
        self.assertEqual(transition(SegmentState.IN_SUMMARY, "Skills"), (SegmentState.IN_SKILLS, True))
        self.assertEqual(
            transition(SegmentState.IN_SUMMARY, "Helped customers daily"),
            (SegmentState.IN_SUMMARY, False),
        )
        self.assertEqual(transition(SegmentState.NONE, "Education"), (SegmentState.IN_EDUCATION, True))


class SegmentTests(unittest.TestCase):
    def test_identity_and_sections_are_split(self):
        parsed = segment(normalize(SAMPLE_CV))

        self.assertEqual(parsed.full_name, "Jane Doe")
        self.assertEqual(parsed.contact_line, "jane@x.com")
        self.assertEqual(parsed.experience_text, "Sales Manager\n2019-2022\n- Grew revenue 20%")
        self.assertEqual(parsed.education_text, "BSc Marketing, LeedsUni, 2018")
        self.assertEqual(parsed.summary_text, "")
        self.assertEqual(parsed.preamble_text, "")

    def test_missing_name_defaults_to_candidate(self):
        parsed = segment("jane@x.com\n07700 900123\nEXPERIENCE\nSales Manager")
        self.assertEqual(parsed.full_name, "Candidate")
        self.assertEqual(parsed.contact_line, "jane@x.com")
        self.assertEqual(parsed.preamble_text, "07700 900123")
        self.assertEqual(parsed.experience_text, "Sales Manager")

    def test_empty_input_is_not_an_error(self):
        parsed = segment("")
        self.assertEqual(parsed.full_name, "Candidate")
        self.assertEqual(parsed.experience_text, "")

    def test_preamble_keeps_free_text_before_first_heading(self):
        text = (
            "Jane Doe\n"
            "jane@x.com | London\n"
            "Seasoned sales lead with ten years in retail.\n"
            "Summary\n"
            "Customer-focused and target-driven.\n"
            "Skills\n"
            "Salesforce, Negotiation\n"
            "Projects\n"
            "- Store relaunch\n"
            "Certifications\n"
            "CIM Certificate in Marketing"
        )
        parsed = segment(text)

        self.assertEqual(parsed.contact_line, "jane@x.com | London")
        self.assertEqual(parsed.preamble_text, "Seasoned sales lead with ten years in retail.")
        self.assertEqual(parsed.summary_text, "Customer-focused and target-driven.")
        self.assertEqual(parsed.skills_text, "Salesforce, Negotiation")
        self.assertEqual(parsed.projects_text, "- Store relaunch")
        self.assertEqual(parsed.certifications_text, "CIM Certificate in Marketing")

    def test_contact_line_only_detected_near_the_top(self):
        heuristics = HeuristicConfig(contact_scan_lines=1)
        parsed = segment("Jane Doe\njane@x.com", heuristics)
        self.assertEqual(parsed.contact_line, "")
        self.assertEqual(parsed.preamble_text, "jane@x.com")

    def test_extra_locality_keywords_mark_contact_lines(self):
        heuristics = HeuristicConfig(locality_keywords=("dublin",))
        parsed = segment("Jane Doe\nDublin, Ireland", heuristics)
        self.assertEqual(parsed.contact_line, "Dublin, Ireland")

    def test_name_with_city_is_still_the_name(self):
        parsed = segment("Jane Doe, London\njane@x.com\nEXPERIENCE\nSales Manager")

        self.assertEqual(parsed.full_name, "Jane Doe")
        self.assertEqual(parsed.contact_line, "jane@x.com | London")
        self.assertEqual(parsed.preamble_text, "")
        self.assertEqual(parsed.experience_text, "Sales Manager")

    def test_surnames_matching_localities_are_names(self):
        self.assertEqual(segment("Jack London\njack@x.com").full_name, "Jack London")
        self.assertEqual(segment("Sam Leeds\n07700 900123").full_name, "Sam Leeds")
        self.assertEqual(segment("Sam Leeds\n07700 900123").contact_line, "07700 900123")

    def test_locality_only_first_line_is_contact(self):
        parsed = segment("London, UK\nJane Doe\nEXPERIENCE\nSales Manager")
        self.assertEqual(parsed.full_name, "Jane Doe")
        self.assertEqual(parsed.contact_line, "London, UK")


if __name__ == "__main__":
    unittest.main()
