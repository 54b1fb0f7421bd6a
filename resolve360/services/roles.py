# resolve360/services/roles.py
import logging
from enum import Enum
from typing import Any, Dict, Tuple

import asyncpg

from ..queries import user_queries
from .catalog import RoutingConfig

logger = logging.getLogger(__name__)

class Role(str, Enum):
    USER = "user"
    CONTRACTOR = "contractor"
    ADMIN = "admin"

ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.CONTRACTOR: "Technician",
    Role.USER: "Resident",
}

class RoleResolver:
    """Maps an email address to a role using the configured allow-lists."""

    def __init__(self, config: RoutingConfig):
        self.config = config

    def resolve_role(self, email: str) -> Role:
        lower_email = (email or "").strip().lower()
        if lower_email in self.config.admin_emails:
            return Role.ADMIN
        if lower_email in self.config.contractor_emails:
            return Role.CONTRACTOR
        return Role.USER

    def is_authorized(self, email: str, role) -> bool:
        # Residents have no allow-list; callers treat them as authorized by default.
        lower_email = (email or "").strip().lower()
        role = getattr(role, "value", role)
        if role == Role.ADMIN.value:
            return lower_email in self.config.admin_emails
        if role == Role.CONTRACTOR.value:
            return lower_email in self.config.contractor_emails
        return False

async def reconcile_role(
    conn: asyncpg.Connection,
    resolver: RoleResolver,
    uid: str,
    email: str,
    display_name: str = None,
    photo_url: str = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Run on every completed sign-in.
    Creates the profile on first sign-in; afterwards overwrites the stored
    role whenever the allow-lists now say something different.
    Returns the user record and whether the role changed.
    """
    detected = resolver.resolve_role(email)
    user = await user_queries.get_user_by_id(conn, uid)

    if user is None:
        user = await user_queries.create_user(
            conn,
            user_id=uid,
            email=email,
            display_name=display_name,
            photo_url=photo_url,
            role=detected.value,
        )
        logger.info(f"Created {detected.value} profile for {email}")
        return dict(user), False

    if user["role"] != detected.value:
        logger.info(f"Role for {email} changed from {user['role']} to {detected.value}")
        user = await user_queries.update_user_role(conn, uid, detected.value)
        return dict(user), True

    return dict(user), False
