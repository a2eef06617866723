import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_TOKEN_SECRET = "replace-this-in-production"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings, read once from the environment"""

    host: str = "0.0.0.0"
    port: int = 8000
    data_dir: Path = Path("data")
    auth_token_secret: str = DEFAULT_TOKEN_SECRET
    auth_token_ttl_days: int = 30
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    github_token: Optional[str] = None
    model_endpoint: str = "https://models.github.ai/inference"
    model_id: str = "openai/gpt-4o-mini"
    model_candidates: List[str] = field(default_factory=list)
    career_profiles_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        model_id = os.getenv("GITHUB_MODEL_ID", cls.model_id)
        # Optional comma-separated candidates: e.g., "openai/gpt-4o-mini,openai/gpt-4o"
        candidates = _split_csv(os.getenv("GITHUB_MODEL_CANDIDATES", "")) or [model_id, "openai/gpt-4o"]
        profiles_path = os.getenv("CAREER_PROFILES_PATH", "").strip()

        return cls(
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", "8000")),
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            auth_token_secret=(os.getenv("AUTH_TOKEN_SECRET") or DEFAULT_TOKEN_SECRET).strip(),
            auth_token_ttl_days=max(1, int(os.getenv("AUTH_TOKEN_TTL_DAYS", "30"))),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS", "http://localhost:3000")),
            github_token=os.getenv("GITHUB_TOKEN") or None,
            model_endpoint=os.getenv("GITHUB_MODEL_ENDPOINT", cls.model_endpoint),
            model_id=model_id,
            model_candidates=candidates,
            career_profiles_path=Path(profiles_path) if profiles_path else None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
