from __future__ import annotations

import json

import pytest

from app.services.career_profiles import load_career_profiles
from app.services.skill_extractor import detect_career, extract_skills, skill_vocabulary

PROFILES = load_career_profiles()


def test_vocabulary_has_no_duplicates():
    vocabulary = [skill.lower() for skill in skill_vocabulary(PROFILES)]
    assert len(vocabulary) == len(set(vocabulary))
    assert "javascript" in vocabulary


def test_extracts_whole_tokens_only():
    skills = extract_skills("Built React and Node.js apps on SQL at Google.", PROFILES)
    assert {"React", "Node.js", "SQL"} <= set(skills)
    # "R" must not come from "React", "Go" must not come from "Google"
    assert "R" not in skills
    assert "Go" not in skills
    assert "JavaScript" not in skills


def test_extracts_skills_with_symbols():
    skills = extract_skills("Set up CI/CD pipelines and A/B Testing dashboards", PROFILES)
    assert "CI/CD" in skills
    assert "A/B Testing" in skills


def test_empty_text_has_no_skills():
    assert extract_skills("", PROFILES) == []
    assert detect_career("", PROFILES) is None


def test_named_career_wins():
    assert detect_career("I am an aspiring data scientist who knows Figma", PROFILES) == "Data Scientist"


def test_career_inferred_from_skills():
    text = "Figma, Wireframing, Prototyping and User Research for mobile apps"
    assert detect_career(text, PROFILES) == "UI/UX Designer"


def test_no_career_without_signals():
    assert detect_career("I enjoy hiking and cooking.", PROFILES) is None


def test_custom_profile_file(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(
        json.dumps({"Chef": {"essential": ["Knife Skills"], "important": ["Baking"], "niceToHave": []}}),
        encoding="utf-8",
    )
    profiles = load_career_profiles(path)
    assert list(profiles) == ["Chef"]
    assert profiles["Chef"].essential == ("Knife Skills",)
    assert detect_career("Strong knife skills and baking", profiles) == "Chef"


def test_profile_file_rejects_unknown_tiers(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({"Chef": {"critical": ["Knife Skills"]}}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_career_profiles(path)


def test_profile_file_rejects_non_list_tiers(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({"Chef": {"essential": "Knife Skills"}}), encoding="utf-8")
    with pytest.raises(ValueError, match="list of skill names"):
        load_career_profiles(path)


def test_profile_file_rejects_duplicate_skills(tmp_path):
    path = tmp_path / "profiles.json"
    path.write_text(json.dumps({"Chef": {"essential": ["Baking", "baking"]}}), encoding="utf-8")
    with pytest.raises(ValueError, match="more than once"):
        load_career_profiles(path)


def test_profiles_are_read_only():
    with pytest.raises(TypeError):
        PROFILES["Astronaut"] = PROFILES["Data Scientist"]
