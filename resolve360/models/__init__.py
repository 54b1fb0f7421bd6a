from .auth import Token, SignInRequest, SessionOut, UserOut, UserActiveUpdate
from .issue import (
    Priority,
    IssueOut,
    IssueStatusUpdate,
    ClassificationCorrection,
    IssueStatistics
)
from .category import CategoryOut, IssueDescription, ClassificationOut

__all__ = [
    'Token', 'SignInRequest', 'SessionOut', 'UserOut', 'UserActiveUpdate',
    'Priority', 'IssueOut', 'IssueStatusUpdate',
    'ClassificationCorrection', 'IssueStatistics',
    'CategoryOut', 'IssueDescription', 'ClassificationOut'
]
