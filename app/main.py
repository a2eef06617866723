import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Mapping, Optional

from fastapi import Depends, FastAPI, File, Header, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import DEFAULT_TOKEN_SECRET, Settings
from app.models import (
    AuthResponse,
    CareerList,
    GradingReport,
    LoginRequest,
    Message,
    RecommendationResponse,
    Roadmap,
    RoadmapCreate,
    RoadmapList,
    RoadmapSaved,
    SignupRequest,
    SkillExtractionResult,
    SkillsRequest,
    SkillTextRequest,
    UserPublic,
)
from app.services.auth import AuthError, AuthService
from app.services.career_profiles import CareerProfile, load_career_profiles
from app.services.file_processor import FileProcessingError, FileProcessor
from app.services.recommender import CareerRecommender, RecommendationError
from app.services.skill_extractor import detect_career, extract_skills
from app.services.skill_grader import compute_grade
from app.services.storage import RoadmapRepository, UserRepository

settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize services
career_profiles = load_career_profiles(settings.career_profiles_path)
user_repository = UserRepository(settings.data_dir / "users.json")
roadmap_repository = RoadmapRepository(settings.data_dir / "roadmaps.json")
auth_service = AuthService(user_repository, settings.auth_token_secret, settings.auth_token_ttl_days)
career_recommender = CareerRecommender(
    github_token=settings.github_token,
    model_endpoint=settings.model_endpoint,
    model_candidates=settings.model_candidates,
)
file_processor = FileProcessor()


@asynccontextmanager
async def lifespan(app: FastAPI):
    user_repository.initialize()
    roadmap_repository.initialize()
    logger.info("Data directory: %s", settings.data_dir.resolve())
    logger.info("Loaded %d career profiles", len(career_profiles))
    if settings.auth_token_secret == DEFAULT_TOKEN_SECRET:
        logger.warning("AUTH_TOKEN_SECRET is using a default value. Set AUTH_TOKEN_SECRET in production.")
    if not career_recommender.configured:
        logger.warning("GITHUB_TOKEN is not set; AI recommendations will ask clients to use static content")
    yield


app = FastAPI(title="Career Roadmap API", version="1.0.0", lifespan=lifespan)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependencies, overridable in tests

def get_career_profiles() -> Mapping[str, CareerProfile]:
    return career_profiles


def get_roadmap_repository() -> RoadmapRepository:
    return roadmap_repository


def get_auth_service() -> AuthService:
    return auth_service


def get_recommender() -> CareerRecommender:
    return career_recommender


def get_file_processor() -> FileProcessor:
    return file_processor


def current_user(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> Dict[str, Any]:
    """Resolve the bearer token into its {userId, email} payload"""
    parts = (authorization or "").split(" ")
    token = parts[1] if len(parts) > 1 else ""
    if not token:
        raise HTTPException(status_code=401, detail="No token provided")
    try:
        return auth.verify_token(token)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


def _require_career_and_skills(career: Optional[str], skills: Optional[list]) -> None:
    if not career or not skills:
        raise HTTPException(status_code=400, detail="Career and skills are required")


@app.get("/api/health")
async def health_check():
    return {"status": "Backend is running"}


# Authentication

@app.post("/api/auth/signup", response_model=AuthResponse)
def signup(payload: SignupRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        token, user = auth.signup(payload.email, payload.password, payload.confirm_password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("Signup error")
        raise HTTPException(status_code=500, detail="Signup failed")

    return AuthResponse(
        token=token,
        user=UserPublic(user_id=user["userId"], email=user["email"]),
        message="Account created successfully",
    )


@app.post("/api/auth/login", response_model=AuthResponse)
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        token, user = auth.login(payload.email, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception:
        logger.exception("Login error")
        raise HTTPException(status_code=500, detail="Login failed")

    return AuthResponse(
        token=token,
        user=UserPublic(user_id=user["userId"], email=user["email"]),
        message="Login successful",
    )


# Roadmaps

@app.post("/api/roadmaps", response_model=RoadmapSaved)
def save_roadmap(
    payload: RoadmapCreate,
    user: Dict[str, Any] = Depends(current_user),
    roadmaps: RoadmapRepository = Depends(get_roadmap_repository),
):
    if not payload.career or payload.skills is None:
        raise HTTPException(status_code=400, detail="Career and skills are required")
    try:
        roadmap = roadmaps.add(user["userId"], payload.career, payload.skills, payload.recommendations)
    except Exception:
        logger.exception("Save roadmap error")
        raise HTTPException(status_code=500, detail="Failed to save roadmap")

    return RoadmapSaved(message="Roadmap saved successfully", roadmap=Roadmap.model_validate(roadmap))


@app.get("/api/roadmaps", response_model=RoadmapList)
def list_roadmaps(
    user: Dict[str, Any] = Depends(current_user),
    roadmaps: RoadmapRepository = Depends(get_roadmap_repository),
):
    try:
        user_roadmaps = [Roadmap.model_validate(r) for r in roadmaps.list_for(user["userId"])]
    except Exception:
        logger.exception("Fetch roadmaps error")
        raise HTTPException(status_code=500, detail="Failed to fetch roadmaps")

    return RoadmapList(roadmaps=user_roadmaps, total=len(user_roadmaps))


@app.get("/api/roadmaps/{roadmap_id}", response_model=Roadmap)
def get_roadmap(
    roadmap_id: str,
    user: Dict[str, Any] = Depends(current_user),
    roadmaps: RoadmapRepository = Depends(get_roadmap_repository),
):
    try:
        roadmap = roadmaps.get(user["userId"], roadmap_id)
    except Exception:
        logger.exception("Fetch roadmap error")
        raise HTTPException(status_code=500, detail="Failed to fetch roadmap")

    if roadmap is None:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return Roadmap.model_validate(roadmap)


@app.delete("/api/roadmaps/{roadmap_id}", response_model=Message)
def delete_roadmap(
    roadmap_id: str,
    user: Dict[str, Any] = Depends(current_user),
    roadmaps: RoadmapRepository = Depends(get_roadmap_repository),
):
    try:
        found = roadmaps.delete(user["userId"], roadmap_id)
    except Exception:
        logger.exception("Delete roadmap error")
        raise HTTPException(status_code=500, detail="Failed to delete roadmap")

    if not found:
        raise HTTPException(status_code=404, detail="No roadmaps found")
    return Message(message="Roadmap deleted successfully")


# Skills

@app.get("/api/careers", response_model=CareerList)
def list_careers(profiles: Mapping[str, CareerProfile] = Depends(get_career_profiles)):
    names = list(profiles)
    return CareerList(careers=names, total=len(names))


@app.post("/api/skills/grade", response_model=GradingReport)
def grade_skills(payload: SkillsRequest, profiles: Mapping[str, CareerProfile] = Depends(get_career_profiles)):
    _require_career_and_skills(payload.career, payload.skills)
    return compute_grade(payload.skills, payload.career, profiles)


@app.post("/api/skills/extract", response_model=SkillExtractionResult)
def extract_skills_from_text(
    payload: SkillTextRequest,
    profiles: Mapping[str, CareerProfile] = Depends(get_career_profiles),
):
    return SkillExtractionResult(
        skills=extract_skills(payload.text, profiles),
        career=detect_career(payload.text, profiles),
    )


@app.post("/api/resume/skills", response_model=SkillExtractionResult)
async def extract_skills_from_resume(
    resume: UploadFile = File(...),
    processor: FileProcessor = Depends(get_file_processor),
    profiles: Mapping[str, CareerProfile] = Depends(get_career_profiles),
):
    """
    Extract known skills and a likely career from an uploaded resume
    """
    try:
        text = await processor.extract_text(resume)
    except FileProcessingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not text:
        raise HTTPException(status_code=400, detail="Could not extract text from the provided file.")

    return SkillExtractionResult(
        skills=extract_skills(text, profiles),
        career=detect_career(text, profiles),
    )


@app.post("/api/generate-recommendations", response_model=RecommendationResponse)
async def generate_recommendations(
    payload: SkillsRequest,
    recommender: CareerRecommender = Depends(get_recommender),
    profiles: Mapping[str, CareerProfile] = Depends(get_career_profiles),
):
    """
    AI recommendations for a career, merged with the deterministic skill grade
    """
    _require_career_and_skills(payload.career, payload.skills)

    try:
        recommendations = await asyncio.to_thread(recommender.generate, payload.career, payload.skills)
    except RecommendationError as e:
        return JSONResponse(status_code=500, content={"detail": str(e), "useStatic": True})
    except Exception:
        logger.exception("AI generation error")
        return JSONResponse(
            status_code=500,
            content={"detail": "Server error while generating recommendations", "useStatic": True},
        )

    grading = compute_grade(payload.skills, payload.career, profiles)
    return RecommendationResponse(**recommendations.model_dump(), grading=grading)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
