# resolve360/services/classifier.py
"""
Keyword classifier for maintenance issue descriptions.

Each category scores one point per keyword found anywhere in the lower-cased
description (substring containment, repeats do not count twice). The highest
score wins, ties going to the category declared first. With no match at all
the issue lands in the default category at a fixed low confidence.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .catalog import CategoryProfile, RoutingConfig

DEFAULT_CONFIDENCE = 0.3
BASE_CONFIDENCE = 0.5
CONFIDENCE_STEP = 0.1
MAX_CONFIDENCE = 0.85


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    priority: str
    contractor_pool_key: str
    explanatory_text: str
    score: int = 0


def confidence_for(score: int) -> float:
    """Confidence for a keyword score; non-decreasing and capped."""
    if score <= 0:
        return DEFAULT_CONFIDENCE
    return round(min(MAX_CONFIDENCE, BASE_CONFIDENCE + score * CONFIDENCE_STEP), 4)


class IssueClassifier:
    def __init__(self, config: RoutingConfig):
        self.config = config

    def score(self, description: Optional[str]) -> Dict[str, int]:
        desc_lower = (description or "").lower()
        return {
            profile.name: sum(1 for keyword in profile.keywords if keyword in desc_lower)
            for profile in self.config.categories
        }

    def classify(self, description: Optional[str]) -> ClassificationResult:
        scores = self.score(description)

        best_profile = None
        best_score = 0
        for profile in self.config.categories:
            if scores[profile.name] > best_score:
                best_profile = profile
                best_score = scores[profile.name]

        if best_profile is None:
            best_profile = self.config.category(self.config.default_category)

        return ClassificationResult(
            category=best_profile.name,
            confidence=confidence_for(best_score),
            priority=best_profile.priority,
            contractor_pool_key=best_profile.name,
            explanatory_text=best_profile.description,
            score=best_score,
        )

    def list_categories(self) -> List[str]:
        return list(self.config.category_names)

    def category_details(self, category: str) -> Optional[CategoryProfile]:
        return self.config.category(category)
