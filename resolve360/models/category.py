# resolve360/models/category.py
from pydantic import BaseModel
from typing import List, Optional

class CategoryOut(BaseModel):
    name: str
    priority: str
    description: str
    keywords: List[str]
    contractors: List[str]

class IssueDescription(BaseModel):
    description: Optional[str] = ""

class ClassificationOut(BaseModel):
    category: str
    confidence: float
    priority: str
    description: str
    contractors: List[str]
