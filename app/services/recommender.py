import json
import logging
import re
from typing import List, Optional, Sequence

from azure.ai.inference import ChatCompletionsClient
from azure.ai.inference.models import SystemMessage, UserMessage
from azure.core.credentials import AzureKeyCredential
from pydantic import ValidationError

from app.models import Recommendations

logger = logging.getLogger(__name__)

UNAVAILABLE_MODEL_MARKERS = ("unavailable model", "unavailable_model", "unknown model")
JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class RecommendationError(Exception):
    """The AI recommendation could not be produced; clients should fall back to static content"""


class CareerRecommender:
    """Service for generating career recommendations through GitHub Models"""

    def __init__(
        self,
        github_token: Optional[str],
        model_endpoint: str = "https://models.github.ai/inference",
        model_candidates: Sequence[str] = ("openai/gpt-4o-mini",),
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self.github_token = github_token
        self.model_endpoint = model_endpoint
        self.model_candidates: List[str] = list(model_candidates)
        self.model_id = self.model_candidates[0] if self.model_candidates else None
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def configured(self) -> bool:
        return bool(self.github_token)

    def generate(self, career: str, skills: Sequence[str]) -> Recommendations:
        if not self.configured:
            raise RecommendationError("AI API key not configured")

        prompt = self._create_prompt(career, skills)
        try:
            response_text = self._call_github_models(prompt)
        except RecommendationError:
            raise
        except Exception as e:
            logger.error("GitHub Models call failed: %s", e)
            raise RecommendationError("Failed to generate recommendations") from e

        return self._parse_response(response_text)

    def _create_prompt(self, career: str, skills: Sequence[str]) -> str:
        return f"""You are a career counselor. A person is targeting the career of "{career}" and has these skills: {', '.join(skills)}.

Provide ONLY a valid JSON response with this exact structure (no markdown, no extra text, ONLY JSON):
{{
  "missingSkills": ["skill1", "skill2", "skill3", "skill4", "skill5"],
  "recommendations": ["rec1", "rec2", "rec3"],
  "nextSteps": ["step1", "step2", "step3"],
  "resources": [
    {{"skill": "skillname", "resource": "resource type", "link": "https://example.com"}},
    {{"skill": "skillname", "resource": "resource type", "link": "https://example.com"}}
  ]
}}

Make recommendations specific, practical, and varied. Focus on the missing skills and {career} career path."""

    def _call_github_models(self, prompt: str) -> str:
        """Try each candidate model in turn, moving on only when a model is unavailable"""
        messages = [
            SystemMessage("You are a career counselor. Provide responses in valid JSON format only."),
            UserMessage(prompt),
        ]

        last_error: Optional[Exception] = None
        with ChatCompletionsClient(
            endpoint=self.model_endpoint,
            credential=AzureKeyCredential(self.github_token),
        ) as client:
            for candidate_model in self.model_candidates:
                try:
                    response = client.complete(
                        messages=messages,
                        model=candidate_model,
                        temperature=self.temperature,
                        max_tokens=self.max_tokens,
                    )
                except Exception as e:
                    error_text = str(e).lower()
                    if any(marker in error_text for marker in UNAVAILABLE_MODEL_MARKERS):
                        logger.info("Model %s unavailable, trying next candidate", candidate_model)
                        last_error = e
                        continue
                    raise

                if not response or not response.choices or not response.choices[0].message:
                    raise RecommendationError("Failed to generate recommendations")

                self.model_id = candidate_model
                return response.choices[0].message.content or ""

        logger.error(
            "None of the candidate models are available. Tried: %s. Last error: %s",
            ", ".join(self.model_candidates),
            last_error,
        )
        raise RecommendationError("Failed to generate recommendations")

    def _parse_response(self, response: str) -> Recommendations:
        """Parse the first JSON object found in the model reply"""
        json_match = JSON_OBJECT.search(response or "")
        if not json_match:
            raise RecommendationError("Invalid response format from AI")

        try:
            data = json.loads(json_match.group(0))
            return Recommendations.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Unparseable AI response: %s", e)
            raise RecommendationError("Invalid response format from AI") from e
