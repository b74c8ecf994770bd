from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.factory import get_completion_client  # noqa: E402
from app.core.errors import ResumePipelineError  # noqa: E402
from app.parsing.parse import extract_text  # noqa: E402
from app.schemas.requests import ResumeRequest  # noqa: E402
from app.services.resume_pipeline import ResumePipeline  # noqa: E402


async def _run(args: argparse.Namespace) -> int:
    cv_path = Path(args.cv)
    extracted = extract_text(cv_path.name, cv_path.read_bytes())
    job_description = Path(args.jd).read_text(encoding="utf-8") if args.jd else ""

    client = None if args.offline else get_completion_client()
    pipeline = ResumePipeline(client)
    request = ResumeRequest(cv_text=extracted.text, job_description=job_description)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    if args.format == "json":
        resume = await pipeline.build(request)
        out_path.write_text(json.dumps(resume.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
    else:
        out_path.write_bytes(await pipeline.generate_document(request))
    print(f"Wrote {out_path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a job-aligned CV from a .txt/.pdf/.docx file.")
    parser.add_argument("--cv", required=True, help="Path to the candidate CV")
    parser.add_argument("--jd", default="", help="Path to a plain-text job description")
    parser.add_argument("--out", default="out/Tailored_CV.docx", help="Output path")
    parser.add_argument("--format", choices=("docx", "json"), default="docx")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the completion service and use deterministic fallback text.",
    )
    args = parser.parse_args()

    try:
        raise SystemExit(asyncio.run(_run(args)))
    except ResumePipelineError as exc:
        print(f"error [{exc.code}]: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
