# resolve360/services/reporting.py
import logging
from typing import Any, Dict, Mapping, Optional

import asyncpg

from ..queries import issue_queries
from .assigner import ContractorAssigner
from .classifier import IssueClassifier
from .image_storage import ImageStorage

logger = logging.getLogger(__name__)

async def report_issue(
    conn: asyncpg.Connection,
    reporter: Mapping[str, Any],
    image_data: bytes,
    content_type: str,
    description: Optional[str],
    classifier: IssueClassifier,
    assigner: ContractorAssigner,
    storage: ImageStorage,
    filename: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Store the photo, classify the description, pick a contractor and create
    the issue. Category, priority and contractor all come from the same
    classification pass. If the insert fails nothing is kept and the caller
    starts over from the description.
    """
    image = await storage.store(image_data, content_type, filename)

    result = classifier.classify(description)
    contractor = assigner.assign(result.contractor_pool_key)
    logger.info(
        f"Classified issue from {reporter.get('email')} as {result.category} "
        f"(confidence {result.confidence}, priority {result.priority})"
    )

    issue = await issue_queries.create_issue(
        conn,
        user_id=reporter.get("user_id"),
        user_email=reporter.get("email"),
        user_name=reporter.get("display_name"),
        image_url=image.image_url,
        upload_success=image.upload_success,
        description=description,
        category=result.category,
        priority=result.priority,
        assigned_contractor=contractor,
        confidence=result.confidence,
    )
    return dict(issue)

async def correct_classification(
    conn: asyncpg.Connection,
    issue_id,
    category: str,
    classifier: IssueClassifier,
    assigner: ContractorAssigner,
    contractor: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Re-file an issue under another category.
    Priority follows the new category and the contractor is redrawn from its
    pool unless one is given.
    """
    profile = classifier.category_details(category)
    if profile is None:
        raise ValueError(f"Unknown category: {category}")

    updates = {
        "category": profile.name,
        "priority": profile.priority,
        "assigned_contractor": (contractor or assigner.assign(profile.name)).lower(),
        "confidence": 1.0,
    }
    issue = await issue_queries.update_issue(conn, issue_id, updates)
    return dict(issue)
