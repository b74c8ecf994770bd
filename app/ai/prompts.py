from app.normalize.utils import truncate

CV_WRITER_SYSTEM = (
    "You are an expert UK CV writer. You write ATS-optimised CVs in UK English "
    "using clear, concise language. Never invent employers, job titles, dates, "
    "qualifications or achievements that are not present in the candidate text."
)


def _jd_block(job_description: str, limit: int) -> str:
    jd = truncate(job_description, limit)
    return jd or "(no job description supplied - keep the content general for the candidate's field)"


def build_summary_prompt(
    summary_source: str,
    job_description: str,
    *,
    target_title: str = "",
    cv_limit: int = 900,
    jd_limit: int = 1500,
) -> tuple[str, str]:
    target = target_title.strip() or "the role"
    user = (
        "Rewrite the candidate summary so it stays true to them but aligns to this job.\n"
        f"Target role: {target}.\n"
        "3-5 sentences. UK English. ATS-friendly. No waffle. "
        "Do not add achievements, numbers or employers that are not in the source.\n\n"
        f'Candidate summary:\n"""{truncate(summary_source, cv_limit)}"""\n\n'
        f'Job description:\n"""{_jd_block(job_description, jd_limit)}"""\n\n'
        "Return ONLY the summary."
    )
    return CV_WRITER_SYSTEM, user


def build_experience_prompt(
    experience_text: str,
    job_description: str,
    *,
    cv_limit: int = 2500,
    jd_limit: int = 1500,
) -> tuple[str, str]:
    user = (
        "Rewrite the bullet points of each role so they emphasise the skills and terms "
        "in the job description. Keep every employer, job title, location and date exactly "
        "as written. Do not add roles.\n"
        "Format every role as:\n"
        "Job Title — Company, Location\n"
        "Start – End\n"
        "- bullet\n"
        "- bullet\n\n"
        f'Experience:\n"""{truncate(experience_text, cv_limit)}"""\n\n'
        f'Job description:\n"""{_jd_block(job_description, jd_limit)}"""\n\n'
        "Return ONLY the rewritten experience."
    )
    return CV_WRITER_SYSTEM, user


def build_skills_prompt(
    cv_text: str,
    job_description: str,
    *,
    cv_limit: int = 2500,
    jd_limit: int = 1500,
) -> tuple[str, str]:
    user = (
        'Make one line of 8-14 skills separated by " • ".\n'
        "Use only skills that appear in the CV or are clearly transferable to the job.\n\n"
        f'CV:\n"""{truncate(cv_text, cv_limit)}"""\n\n'
        f'JD:\n"""{_jd_block(job_description, jd_limit)}"""\n\n'
        "Return ONLY the line."
    )
    return CV_WRITER_SYSTEM, user


def build_structured_prompt(
    cv_text: str,
    job_description: str,
    *,
    target_title: str = "",
    cv_limit: int = 2500,
    jd_limit: int = 1500,
) -> tuple[str, str]:
    user = (
        "Tailor the candidate's CV to the job description.\n"
        f"Target role: {target_title.strip() or 'as implied by the job description'}.\n\n"
        "Return STRICT JSON with these keys ONLY:\n"
        "- summary: string (3-5 sentences, UK tone)\n"
        "- skills: array of 8-14 ATS keywords shared by the CV and the job description\n"
        '- experience_blocks: array of roles, each {"title": string, "company": string, '
        '"location": string, "start": string, "end": string, "bullets": array of 3-6 strings}\n'
        '- education: array of {"degree": string, "institution": string, "year": string}\n\n'
        "DO NOT include any commentary or extra keys.\n\n"
        f'JOB DESCRIPTION:\n"""{_jd_block(job_description, jd_limit)}"""\n\n'
        f'CANDIDATE CV:\n"""{truncate(cv_text, cv_limit)}"""'
    )
    return CV_WRITER_SYSTEM, user
