import asyncio
import dataclasses
import sys
import unittest
from io import BytesIO
from pathlib import Path

from docx import Document

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings  # noqa: E402
from app.core.errors import InputError, ServiceTimeoutError, UpstreamRateLimited  # noqa: E402
from app.schemas.requests import ResumeRequest  # noqa: E402
from app.services.assembler import EXPERIENCE_PLACEHOLDER  # noqa: E402
from app.parsing.models import ExtractedDocument  # noqa: E402
from app.services.resume_pipeline import ResumePipeline, ensure_extracted_text  # noqa: E402

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


class CountingClient:
    def __init__(self, error=None, delay_s=0.0):
        self.error = error
        self.delay_s = delay_s
        self.calls = 0

    async def complete(self, system_prompt, user_prompt, options):
        self.calls += 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        return ""


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


class PipelineTests(unittest.TestCase):
    def test_pasted_text_without_capability(self):
        resume = asyncio.run(ResumePipeline(None).build(ResumeRequest(cv_text=SAMPLE_CV)))

        self.assertEqual(resume.full_name, "Jane Doe")
        self.assertEqual(len(resume.experience), 1)
        self.assertIn("Sales Manager", resume.experience[0].title)
        self.assertEqual(resume.experience[0].bullets, ["Grew revenue 20%"])
        self.assertEqual(len(resume.education), 1)
        self.assertTrue(resume.education[0].degree.startswith("BSc Marketing"))
        self.assertTrue(resume.skills_line)

    def test_parse_report(self):
        report = ResumePipeline(None).parse_report(SAMPLE_CV)

        self.assertEqual(report.parsed.full_name, "Jane Doe")
        self.assertEqual(report.experience[0].end, "2022")
        self.assertEqual(report.education[0].institution, "LeedsUni")

    def test_empty_cv_text_stops_before_alignment(self):
        client = CountingClient()
        pipeline = ResumePipeline(client)

        for text in ("", "   \n "):
            with self.assertRaises(InputError):
                asyncio.run(pipeline.build(ResumeRequest(cv_text=text)))
        with self.assertRaises(InputError):
            pipeline.parse_report("")
        self.assertEqual(client.calls, 0)

    def test_extracted_text_word_floor(self):
        document = ExtractedDocument(filename="cv.txt", source_type="txt", text="  one two three  ")
        self.assertEqual(ensure_extracted_text(document, min_words=3), "one two three")
        with self.assertRaises(InputError):
            ensure_extracted_text(document, min_words=4)
        blank = ExtractedDocument(filename="cv.txt", source_type="txt", text=" ")
        with self.assertRaises(InputError):
            ensure_extracted_text(blank)

    def test_completion_availability_is_logged(self):
        with self.assertLogs("app.services.resume_pipeline", level="INFO") as logs:
            asyncio.run(ResumePipeline(None).build(ResumeRequest(cv_text=SAMPLE_CV)))
        self.assertTrue(any("completion=False" in line for line in logs.output))

    def test_rate_limited_capability_fails_after_one_retry_per_part(self):
        client = CountingClient(error=UpstreamRateLimited("slow down"))
        sleep = RecordingSleep()
        pipeline = ResumePipeline(client, sleep=sleep)

        with self.assertRaises(UpstreamRateLimited) as ctx:
            asyncio.run(pipeline.build(ResumeRequest(cv_text=SAMPLE_CV)))

        self.assertTrue(ctx.exception.retryable)
        # Three parts, each tried once and retried once.
        self.assertEqual(len(sleep.delays), 3)
        self.assertEqual(client.calls, 6)

    def test_request_timeout(self):
        fast_settings = dataclasses.replace(settings, request_timeout_s=0.05)
        pipeline = ResumePipeline(CountingClient(delay_s=1.0), fast_settings)

        with self.assertRaises(ServiceTimeoutError) as ctx:
            asyncio.run(pipeline.build(ResumeRequest(cv_text=SAMPLE_CV)))
        self.assertTrue(ctx.exception.retryable)

    def test_explicit_empty_experience_renders_placeholder(self):
        pipeline = ResumePipeline(None)
        request = ResumeRequest(cv_text=SAMPLE_CV, experience=[])

        blocks = asyncio.run(pipeline.build_blocks(request))
        texts = [block.text for block in blocks]

        self.assertIn(EXPERIENCE_PLACEHOLDER, texts)
        self.assertNotIn("Sales Manager", texts)

    def test_generate_document(self):
        payload = asyncio.run(ResumePipeline(None).generate_document(ResumeRequest(cv_text=SAMPLE_CV)))

        texts = [p.text for p in Document(BytesIO(payload)).paragraphs if p.text]
        self.assertEqual(texts[0], "Jane Doe")
        self.assertIn("Grew revenue 20%", texts)


if __name__ == "__main__":
    unittest.main()
