from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class CamelModel(BaseModel):
    """Models exchanged with the frontend use camelCase keys on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Skill grading

class TierResult(CamelModel):
    skills: List[str]
    matched: Dict[str, bool]
    matched_count: int
    coverage_percent: int


class GradingReport(CamelModel):
    career: str
    essential: TierResult
    important: TierResult
    nice_to_have: TierResult
    overall_percent: int
    overall_grade: str


class SkillsRequest(CamelModel):
    career: Optional[str] = None
    skills: Optional[List[str]] = None

    @field_validator("skills")
    @classmethod
    def no_blank_skills(cls, skills: Optional[List[str]]) -> Optional[List[str]]:
        # A blank entry would match every required skill when graded
        if skills and any(not skill.strip() for skill in skills):
            raise ValueError("Skills must not be blank")
        return skills


class SkillTextRequest(CamelModel):
    text: str = ""


class SkillExtractionResult(CamelModel):
    skills: List[str]
    career: Optional[str] = None


class CareerList(CamelModel):
    careers: List[str]
    total: int


# Auth

class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(CamelModel):
    user_id: str
    email: str


class AuthResponse(CamelModel):
    token: str
    user: UserPublic
    message: str


# Roadmaps

class RoadmapCreate(CamelModel):
    career: Optional[str] = None
    skills: Optional[List[str]] = None
    recommendations: Optional[Any] = None


class Roadmap(CamelModel):
    id: str
    career: str
    skills: List[str]
    recommendations: Optional[Any] = None
    created_at: str
    updated_at: str


class RoadmapSaved(CamelModel):
    message: str
    roadmap: Roadmap


class RoadmapList(CamelModel):
    roadmaps: List[Roadmap]
    total: int


class Message(CamelModel):
    message: str


# AI recommendations

class Resource(CamelModel):
    skill: str
    resource: str
    link: str


class Recommendations(CamelModel):
    missing_skills: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    resources: List[Resource] = Field(default_factory=list)


class RecommendationResponse(Recommendations):
    grading: GradingReport
