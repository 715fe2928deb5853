"""Prompt construction for resume optimization.

Everything here is a pure function of its inputs: the same resume, job
description and tone always produce the same prompt.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

TONES = ("Professional", "Casual", "Impactful", "ATS-Focused")
DEFAULT_TONE = "Professional"
DEFAULT_TARGET_ROLE = "Frontend Developer"

# Backend-facing rendering modes
SINGLE_STRING = "single_string"
STRUCTURED = "structured"

GUIDELINES = """Guidelines:
- Highlight skills, tools, and achievements that match the job description.
- Rewrite bullet points to be clear, quantifiable, and results-driven.
- Keep concise wording and ATS (Applicant Tracking System) friendly formatting.
- Keep 3-5 jobs (preferably 5) in the list of jobs.
- Do not remove important experience unless it is irrelevant. If the resume has more than 5 jobs, keep the most recent 5 and condense older ones.
- Return the updated resume in Markdown format only."""

PERSONA = "You are an expert career coach and resume writer."
TASK = (
    "Rewrite the resume so it is highly relevant to the job posting while "
    "keeping the candidate's authentic experience."
)


@dataclass(frozen=True)
class PromptPayload:
    mode: str
    prompt: Optional[str] = None
    messages: Optional[Tuple[Dict[str, str], ...]] = None


def normalize_job_description(job_description: Optional[str]) -> str:
    jd = (job_description or "").strip()
    return jd or DEFAULT_TARGET_ROLE


def normalize_tone(tone: Optional[str]) -> str:
    return (tone or "").strip() or DEFAULT_TONE


def build_prompt(resume_text: str, job_description: Optional[str], tone: Optional[str]) -> str:
    """Flat instruction block for backends that only take a single prompt."""
    return f"""{PERSONA}
The user will provide their resume and a job description.
{TASK}

{GUIDELINES}

Tone: {normalize_tone(tone)}

Target Role:
{normalize_job_description(job_description)}

Resume to improve:
{resume_text}
"""


def build_messages(resume_text: str, job_description: Optional[str], tone: Optional[str]) -> List[Dict[str, str]]:
    """System message with the guidelines, user message with the raw resume."""
    system_prompt = f"""{PERSONA}
{TASK}
{GUIDELINES}
Target role: {normalize_job_description(job_description)}
Tone: {normalize_tone(tone)}
"""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": f"Resume to improve:\n\n{resume_text}"},
    ]


def build(resume_text: str, job_description: Optional[str], tone: Optional[str], mode: str) -> PromptPayload:
    if mode == STRUCTURED:
        return PromptPayload(mode=mode, messages=tuple(build_messages(resume_text, job_description, tone)))
    if mode == SINGLE_STRING:
        return PromptPayload(mode=mode, prompt=build_prompt(resume_text, job_description, tone))
    raise ValueError(f"unknown prompt mode: {mode}")
