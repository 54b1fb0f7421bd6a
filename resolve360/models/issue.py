# resolve360/models/issue.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, Optional
from enum import Enum
from uuid import UUID

from ..services.lifecycle import IssueStatus

class Priority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class IssueOut(BaseModel):
    issue_id: UUID
    user_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    image_url: str
    upload_success: bool = False
    description: Optional[str] = None
    category: str
    priority: Priority
    assigned_contractor: str
    confidence: float = Field(..., ge=0, le=1)
    status: IssueStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

class IssueStatusUpdate(BaseModel):
    status: IssueStatus

class ClassificationCorrection(BaseModel):
    category: str
    assigned_contractor: Optional[str] = None

class IssueStatistics(BaseModel):
    total: int
    open: int
    assigned: int
    resolved: int
    by_category: Dict[str, int]
    by_priority: Dict[str, int]
