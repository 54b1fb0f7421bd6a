# resolve360/routes/categories.py
from fastapi import APIRouter, HTTPException
from typing import List

from ..models.category import CategoryOut, ClassificationOut, IssueDescription
from ..services import contractor_assigner, issue_classifier

categories_router = APIRouter(prefix="/categories", tags=["Categories"])

def _category_out(name: str) -> dict:
    profile = issue_classifier.category_details(name)
    return {
        "name": profile.name,
        "priority": profile.priority,
        "description": profile.description,
        "keywords": list(profile.keywords),
        "contractors": list(contractor_assigner.pool_for(profile.name))
    }

@categories_router.get("/", response_model=List[CategoryOut])
async def list_categories():
    return [_category_out(name) for name in issue_classifier.list_categories()]

@categories_router.get("/{category:path}", response_model=CategoryOut)
async def get_category(category: str):
    if issue_classifier.category_details(category) is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return _category_out(category)

@categories_router.post("/classify", response_model=ClassificationOut)
async def preview_classification(issue: IssueDescription):
    """Classify a description without creating an issue"""
    result = issue_classifier.classify(issue.description)
    return {
        "category": result.category,
        "confidence": result.confidence,
        "priority": result.priority,
        "description": result.explanatory_text,
        "contractors": list(contractor_assigner.pool_for(result.contractor_pool_key))
    }
