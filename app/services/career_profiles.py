import json
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

TIER_NAMES = ("essential", "important", "niceToHave")


@dataclass(frozen=True)
class CareerProfile:
    """Weighted skill tiers for one career"""

    name: str
    essential: Tuple[str, ...] = ()
    important: Tuple[str, ...] = ()
    nice_to_have: Tuple[str, ...] = ()

    def all_skills(self) -> Tuple[str, ...]:
        return self.essential + self.important + self.nice_to_have


# Career name -> (essential, important, nice-to-have)
CAREER_SKILLS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "Full Stack Developer": {
        "essential": ("JavaScript", "React", "Node.js", "SQL", "REST API", "HTML", "CSS"),
        "important": ("TypeScript", "Git", "MongoDB", "Express", "Docker", "Testing"),
        "niceToHave": ("GraphQL", "AWS", "CI/CD", "Redis", "Kubernetes"),
    },
    "Frontend Developer": {
        "essential": ("HTML", "CSS", "JavaScript", "React", "Responsive Design"),
        "important": ("TypeScript", "Git", "Redux", "Testing", "Accessibility"),
        "niceToHave": ("Next.js", "Vue", "Webpack", "Figma", "GraphQL"),
    },
    "Backend Developer": {
        "essential": ("Python", "SQL", "REST API", "Git", "Linux"),
        "important": ("Docker", "PostgreSQL", "Redis", "Testing", "Microservices"),
        "niceToHave": ("Kubernetes", "AWS", "Kafka", "GraphQL", "Go"),
    },
    "Data Scientist": {
        "essential": ("Python", "Statistics", "Machine Learning", "SQL", "Pandas"),
        "important": ("NumPy", "Scikit-learn", "Data Visualization", "Deep Learning", "Jupyter"),
        "niceToHave": ("TensorFlow", "PyTorch", "Spark", "A/B Testing", "Tableau"),
    },
    "Data Analyst": {
        "essential": ("SQL", "Excel", "Statistics", "Data Visualization"),
        "important": ("Python", "Tableau", "Power BI", "Pandas"),
        "niceToHave": ("R", "A/B Testing", "Looker", "ETL"),
    },
    "Machine Learning Engineer": {
        "essential": ("Python", "Machine Learning", "Deep Learning", "TensorFlow", "PyTorch"),
        "important": ("MLOps", "Docker", "SQL", "Scikit-learn", "Statistics"),
        "niceToHave": ("Kubernetes", "Spark", "AWS", "NLP", "Computer Vision"),
    },
    "DevOps Engineer": {
        "essential": ("Linux", "Docker", "Kubernetes", "CI/CD", "Git"),
        "important": ("AWS", "Terraform", "Bash", "Python", "Monitoring"),
        "niceToHave": ("Ansible", "Prometheus", "Grafana", "Azure", "Helm"),
    },
    "Mobile Developer": {
        "essential": ("Swift", "Kotlin", "Mobile UI", "REST API", "Git"),
        "important": ("React Native", "Flutter", "Testing", "Firebase"),
        "niceToHave": ("GraphQL", "CI/CD", "App Store Deployment", "Dart"),
    },
    "Cybersecurity Analyst": {
        "essential": ("Networking", "Linux", "Security Fundamentals", "Firewalls", "Incident Response"),
        "important": ("Python", "SIEM", "Penetration Testing", "Cryptography"),
        "niceToHave": ("Cloud Security", "Forensics", "Bash", "Compliance"),
    },
    "UI/UX Designer": {
        "essential": ("Figma", "User Research", "Wireframing", "Prototyping"),
        "important": ("Design Systems", "Usability Testing", "Adobe XD", "Typography"),
        "niceToHave": ("HTML", "CSS", "Motion Design", "Accessibility"),
    },
}


def _freeze(name: str, tiers: Mapping[str, Iterable[str]]) -> CareerProfile:
    return CareerProfile(
        name=name,
        essential=tuple(tiers.get("essential", ())),
        important=tuple(tiers.get("important", ())),
        nice_to_have=tuple(tiers.get("niceToHave", ())),
    )


def build_career_profiles(table: Mapping[str, Mapping[str, Iterable[str]]]) -> Mapping[str, CareerProfile]:
    """Turn a plain {career: {tier: [skills]}} table into a read-only profile mapping."""
    return MappingProxyType({name: _freeze(name, tiers) for name, tiers in table.items()})


def _validate_tiers(career: str, tiers) -> None:
    if not isinstance(tiers, dict):
        raise ValueError(f"Tiers for {career} must be a JSON object")
    unknown = set(tiers) - set(TIER_NAMES)
    if unknown:
        raise ValueError(f"Unknown tier(s) for {career}: {', '.join(sorted(unknown))}")
    for tier, skills in tiers.items():
        if not isinstance(skills, list) or not all(isinstance(skill, str) for skill in skills):
            raise ValueError(f"{career} {tier} must be a list of skill names")
        # Case-insensitive uniqueness within a tier
        lowered = [skill.lower() for skill in skills]
        if len(set(lowered)) != len(lowered):
            raise ValueError(f"{career} {tier} lists the same skill more than once")


def load_career_profiles(path: Optional[Path] = None) -> Mapping[str, CareerProfile]:
    """
    Build the career profile table once at start-up.

    When ``path`` is given, the JSON file at that path replaces the built-in
    table. It must have the same shape: ``{career: {"essential": [...],
    "important": [...], "niceToHave": [...]}}``.
    """
    if path is None:
        return build_career_profiles(CAREER_SKILLS)

    with Path(path).open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"Career profile file must hold a JSON object: {path}")
    for career, tiers in raw.items():
        _validate_tiers(career, tiers)

    logger.info("Loaded %d career profiles from %s", len(raw), path)
    return build_career_profiles(raw)
