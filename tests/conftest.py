from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import main
from app.models import Recommendations, Resource
from app.services.auth import AuthService
from app.services.recommender import RecommendationError
from app.services.storage import RoadmapRepository, UserRepository


class FakeRecommender:
    def __init__(self, error: str | None = None):
        self.error = error
        self.calls: list[tuple[str, list[str]]] = []

    def generate(self, career, skills):
        self.calls.append((career, list(skills)))
        if self.error:
            raise RecommendationError(self.error)
        return Recommendations(
            missing_skills=["Docker", "TypeScript"],
            recommendations=["Ship a full stack side project"],
            next_steps=["Containerize the project"],
            resources=[Resource(skill="Docker", resource="Course", link="https://docs.docker.com")],
        )


@pytest.fixture
def users(tmp_path) -> UserRepository:
    repo = UserRepository(tmp_path / "users.json")
    repo.initialize()
    return repo


@pytest.fixture
def roadmaps(tmp_path) -> RoadmapRepository:
    repo = RoadmapRepository(tmp_path / "roadmaps.json")
    repo.initialize()
    return repo


@pytest.fixture
def auth(users) -> AuthService:
    return AuthService(users, secret="test-secret-at-least-32-bytes-long", token_ttl_days=1)


@pytest.fixture
def recommender() -> FakeRecommender:
    return FakeRecommender()


@pytest.fixture
def client(auth, roadmaps, recommender):
    main.app.dependency_overrides[main.get_auth_service] = lambda: auth
    main.app.dependency_overrides[main.get_roadmap_repository] = lambda: roadmaps
    main.app.dependency_overrides[main.get_recommender] = lambda: recommender
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    response = client.post(
        "/api/auth/signup",
        json={"email": "sam@example.com", "password": "secret1", "confirmPassword": "secret1"},
    )
    return {"Authorization": f"Bearer {response.json()['token']}"}
