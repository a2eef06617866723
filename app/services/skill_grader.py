import math
from typing import Mapping, Sequence

from app.models import GradingReport, TierResult
from app.services.career_profiles import CareerProfile

TIER_WEIGHTS = {
    "essential": 0.5,
    "important": 0.3,
    "nice_to_have": 0.2,
}

# Inclusive lower bounds, checked in order
GRADE_THRESHOLDS = (
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def letter_grade(percent: int) -> str:
    for lower_bound, grade in GRADE_THRESHOLDS:
        if percent >= lower_bound:
            return grade
    return "F"


def match_skill(user_skills: Sequence[str], candidate_skill: str) -> bool:
    """
    True when any user skill and the candidate are substrings of one another,
    ignoring case.

    This is intentionally loose: "Java" matches "JavaScript" and "C" matches
    both "C++" and "C#", while "JS" does not match "JavaScript". An empty
    user skill is a substring of every candidate and therefore matches.
    """
    if isinstance(user_skills, str):
        user_skills = [user_skills]
    candidate = candidate_skill.lower()
    for user_skill in user_skills:
        skill = user_skill.lower()
        if skill in candidate or candidate in skill:
            return True
    return False


def grade_tier(tier_skills: Sequence[str], user_skills: Sequence[str]) -> TierResult:
    matched = {skill: match_skill(user_skills, skill) for skill in tier_skills}
    matched_count = sum(1 for hit in matched.values() if hit)
    coverage = _round_half_up(100 * matched_count / len(tier_skills)) if tier_skills else 0
    return TierResult(
        skills=list(tier_skills),
        matched=matched,
        matched_count=matched_count,
        coverage_percent=coverage,
    )


def compute_grade(
    user_skills: Sequence[str],
    career_name: str,
    profiles: Mapping[str, CareerProfile],
) -> GradingReport:
    """
    Grade a user's skills against the weighted tiers of ``career_name``.

    Careers missing from ``profiles`` grade as three empty tiers, which gives
    0% and an F rather than an error.
    """
    profile = profiles.get(career_name) or CareerProfile(name=career_name)

    essential = grade_tier(profile.essential, user_skills)
    important = grade_tier(profile.important, user_skills)
    nice_to_have = grade_tier(profile.nice_to_have, user_skills)

    overall = _round_half_up(
        essential.coverage_percent * TIER_WEIGHTS["essential"]
        + important.coverage_percent * TIER_WEIGHTS["important"]
        + nice_to_have.coverage_percent * TIER_WEIGHTS["nice_to_have"]
    )

    return GradingReport(
        career=career_name,
        essential=essential,
        important=important,
        nice_to_have=nice_to_have,
        overall_percent=overall,
        overall_grade=letter_grade(overall),
    )
