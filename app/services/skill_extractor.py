import re
from typing import List, Mapping, Optional

from app.services.career_profiles import CareerProfile
from app.services.skill_grader import compute_grade


def _contains_term(lowered_text: str, term: str) -> bool:
    # Whole-token match: "R" must not hit "React", "Go" must not hit "Google"
    pattern = r"(?<![\w])" + re.escape(term.lower()) + r"(?![\w])"
    return re.search(pattern, lowered_text) is not None


def skill_vocabulary(profiles: Mapping[str, CareerProfile]) -> List[str]:
    """Every skill named in the table, first occurrence order, without duplicates"""
    seen = set()
    vocabulary: List[str] = []
    for profile in profiles.values():
        for skill in profile.all_skills():
            key = skill.lower()
            if key not in seen:
                seen.add(key)
                vocabulary.append(skill)
    return vocabulary


def extract_skills(text: str, profiles: Mapping[str, CareerProfile]) -> List[str]:
    lowered = (text or "").lower()
    if not lowered.strip():
        return []
    return [skill for skill in skill_vocabulary(profiles) if _contains_term(lowered, skill)]


def detect_career(text: str, profiles: Mapping[str, CareerProfile]) -> Optional[str]:
    """
    Guess the career a piece of free text is about.

    A career named outright in the text wins, longest name first so
    "Full Stack Developer" beats a shorter name it contains. Otherwise the
    career that grades best against the skills found in the text is used.
    Returns None when the text names no career and no known skill.
    """
    lowered = (text or "").lower()
    for name in sorted(profiles, key=len, reverse=True):
        if _contains_term(lowered, name):
            return name

    skills = extract_skills(text, profiles)
    if not skills:
        return None

    best_name = None
    best_percent = 0
    for name in profiles:
        percent = compute_grade(skills, name, profiles).overall_percent
        if percent > best_percent:
            best_name, best_percent = name, percent
    return best_name
