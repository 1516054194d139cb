from collections.abc import Mapping
from typing import Any, Dict, List

from ...errors import ValidationError
from ...schemas.score import OptimizationSuggestion, ScoreDetails, ScoreResult

REQUIRED_SECTIONS = [
    ("personal", Mapping),
    ("experience", list),
    ("education", list),
    ("skills", list),
]

ACTION_VERBS = ["responsible", "managed", "developed", "implemented", "achieved", "improved"]

TARGET_WORD_COUNT = 250
MIN_WORD_COUNT = 100
ADEQUATE_WORD_COUNT = 300


def _validate_sections(data: Any) -> None:
    """
    Reject payloads that are missing one of the four required sections.
    Anything inside the sections is optional.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Resume content must be an object")
    for name, expected in REQUIRED_SECTIONS:
        value = data.get(name)
        if value is None:
            raise ValidationError(f"Resume content is missing the '{name}' section")
        if not isinstance(value, expected):
            kind = "an object" if expected is Mapping else "a list"
            raise ValidationError(f"Section '{name}' must be {kind}")


def _flatten(value: Any, chunks: List[str]) -> None:
    if value is None:
        return
    if isinstance(value, str):
        chunks.append(value)
    elif isinstance(value, Mapping):
        for item in value.values():
            _flatten(item, chunks)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _flatten(item, chunks)
    else:
        chunks.append(str(value))


def _gather_text(data: Mapping) -> str:
    """
    Every leaf value of the payload joined into one string.
    """
    chunks: List[str] = []
    _flatten(data, chunks)
    return " ".join(chunks)


def _text(section: Any, key: str) -> str:
    if not isinstance(section, Mapping):
        return ""
    value = section.get(key)
    return value if isinstance(value, str) else ""


def compute_score(data: Dict[str, Any]) -> ScoreResult:
    """
    Heuristic ATS score over a resume content payload.

    The total adds four components (format 20, content 40, skills 10,
    keywords 20) and is capped at 100. The ``details`` block reports each
    dimension with its own formula: content is interpolated over the word
    count and skills counts two points per entry, so those two numbers do not
    match what was added to the total.
    """
    _validate_sections(data)

    personal = data["personal"]
    # Section sizes count every entry, whatever its shape
    experience = data["experience"]
    education = data["education"]
    skills = data["skills"]

    score = 0.0
    issues: List[str] = []

    # FORMAT (20 points)
    format_score = 0
    if "@" in _text(personal, "email"):
        format_score += 5
    if len(_text(personal, "phone")) >= 10:
        format_score += 5
    if _text(personal, "location"):
        format_score += 5
    if len(experience) > 0:
        format_score += 5
    score += format_score

    # CONTENT (40 points, 10 per condition)
    text = _gather_text(data)
    word_count = len(text.split())
    if word_count >= TARGET_WORD_COUNT:
        score += 10
    elif word_count < MIN_WORD_COUNT:
        issues.append("Resume too short (< 100 words)")

    if len(_text(personal, "summary")) > 50:
        score += 10
    else:
        issues.append("Add a professional summary")

    if len(experience) >= 2:
        score += 10
    elif len(experience) == 0:
        issues.append("Add work experience")

    if len(education) >= 1:
        score += 10
    else:
        issues.append("Add education details")

    # SKILLS (10 awarded at most)
    if len(skills) >= 5:
        score += 10
    elif len(skills) > 0:
        score += 5
    else:
        issues.append("Add more skills (minimum 5 recommended)")

    # KEYWORDS (20 points, fractional)
    lowered = text.lower()
    matched = len([verb for verb in ACTION_VERBS if verb in lowered])
    keyword_score = matched / len(ACTION_VERBS) * 20
    score += keyword_score

    if matched < len(ACTION_VERBS):
        issues.append(f"Use strong action verbs ({matched}/{len(ACTION_VERBS)} found)")

    recommendations = [
        "✓ Portfolio/LinkedIn included" if _text(personal, "portfolio") else "Add portfolio/LinkedIn link",
        "✓ Descriptions complete"
        if any(len(_text(entry, "description")) > 20 for entry in experience)
        else "Enhance experience descriptions",
        "✓ Comprehensive skills section" if len(skills) >= 10 else "Add more relevant skills",
        "✓ Adequate content length" if word_count >= ADEQUATE_WORD_COUNT else "Expand resume content",
    ]

    details = ScoreDetails(
        format_score=format_score,
        content_score=min(40.0, 40.0 if word_count >= TARGET_WORD_COUNT else word_count / TARGET_WORD_COUNT * 40),
        skills_score=min(20, len(skills) * 2),
        keyword_score=min(20.0, keyword_score),
    )

    return ScoreResult(
        ats_score=int(round(min(100.0, score))),
        issues=issues,
        recommendations=recommendations,
        details=details,
    )


def get_optimizations(data: Dict[str, Any]) -> List[OptimizationSuggestion]:
    """
    Severity-tagged checklist of structural gaps, independent of the score.
    """
    _validate_sections(data)

    personal = data["personal"]
    experience = data["experience"]
    skills = data["skills"]
    email = _text(personal, "email")

    suggestions: List[OptimizationSuggestion] = []

    if not email:
        suggestions.append(OptimizationSuggestion(level="error", msg="Email required"))
    if not _text(personal, "firstName"):
        suggestions.append(OptimizationSuggestion(level="error", msg="First name required"))
    if len(experience) == 0:
        suggestions.append(OptimizationSuggestion(level="warning", msg="No work experience found"))
    if len(skills) < 5:
        suggestions.append(OptimizationSuggestion(level="warning", msg=f"Only {len(skills)} skills - add more"))

    if "+" in email:
        suggestions.append(
            OptimizationSuggestion(level="info", msg="Use standard email format (some ATS may skip email aliases)")
        )

    for idx, entry in enumerate(experience, start=1):
        if len(_text(entry, "description")) < 30:
            suggestions.append(
                OptimizationSuggestion(level="warning", msg=f"Experience #{idx}: Add detailed description")
            )

    return suggestions
