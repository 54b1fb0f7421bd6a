# resolve360/services/catalog.py
"""
Routing configuration: the category table, contractor pools and role
allow-lists the core services work from.

The tables are frozen into a RoutingConfig once at start-up and handed to
RoleResolver, IssueClassifier and ContractorAssigner explicitly, so tests can
build their own configuration instead of patching module globals.
"""
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CATEGORY = "Common Area Maintenance/Housekeeping"
GENERIC_CONTRACTOR = "general@resolve360.com"


def _clean_emails(emails) -> Tuple[str, ...]:
    return tuple(e.strip().lower() for e in emails if e and e.strip())


class CategoryProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    keywords: Tuple[str, ...]
    priority: Literal["critical", "high", "medium", "low"]
    description: str = ""

    @field_validator("keywords")
    @classmethod
    def lower_keywords(cls, keywords: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(k.strip().lower() for k in keywords if k.strip())


# Declaration order matters: ties go to the category listed first.
DEFAULT_CATEGORIES: Tuple[CategoryProfile, ...] = (
    CategoryProfile(
        name="Plumbing",
        keywords=("pipe", "leak", "water", "drain", "faucet", "toilet", "sink", "shower", "valve"),
        priority="high",
        description="Water-related issues including leaks, clogs, and fixture problems",
    ),
    CategoryProfile(
        name="Electrical",
        keywords=("wire", "outlet", "switch", "light", "power", "circuit", "breaker", "fuse", "electrical"),
        priority="critical",
        description="Electrical issues including wiring, outlets, and power problems",
    ),
    CategoryProfile(
        name="Civil",
        keywords=("wall", "ceiling", "floor", "crack", "structural", "concrete", "brick", "paint", "damage"),
        priority="medium",
        description="Structural and civil engineering issues",
    ),
    CategoryProfile(
        name=DEFAULT_CATEGORY,
        keywords=("clean", "trash", "litter", "maintenance", "common", "area", "housekeeping", "cleaning"),
        priority="low",
        description="General maintenance and housekeeping issues",
    ),
    CategoryProfile(
        name="HVAC",
        keywords=("air", "conditioning", "heating", "ventilation", "ac", "hvac", "cooling", "thermostat", "duct"),
        priority="high",
        description="Heating, ventilation, and air conditioning issues",
    ),
)

DEFAULT_CONTRACTOR_POOLS = {
    "Plumbing": ("plumber1@resolve360.com", "plumber2@resolve360.com"),
    "Electrical": ("electrician1@resolve360.com", "electrician2@resolve360.com"),
    "Civil": ("contractor1@resolve360.com", "contractor2@resolve360.com"),
    DEFAULT_CATEGORY: ("maintenance1@resolve360.com", "maintenance2@resolve360.com"),
    "HVAC": ("hvac1@resolve360.com", "hvac2@resolve360.com"),
}

DEFAULT_ADMIN_EMAILS = (
    "siddharthpaladugula@gmail.com",
    "samhithbade44@gmail.com",
    "aenreddy.souchithreddy@gmail.com",
    "admin@insta-maintain.com",
    "manager@insta-maintain.com",
    "supervisor@insta-maintain.com",
)

DEFAULT_CONTRACTOR_EMAILS = (
    "siddharthsleeps@gmail.com",
    "24071a6760@vnrvjiet.in",
    "electrician1@resolve360.com",
    "electrician2@resolve360.com",
    "contractor1@resolve360.com",
    "contractor2@resolve360.com",
    "maintenance1@resolve360.com",
    "maintenance2@resolve360.com",
    "hvac1@resolve360.com",
    "hvac2@resolve360.com",
    "plumber1@insta-maintain.com",
    "plumber2@insta-maintain.com",
    "electrician1@insta-maintain.com",
    "electrician2@insta-maintain.com",
    "contractor1@insta-maintain.com",
    "contractor2@insta-maintain.com",
    "maintenance1@insta-maintain.com",
    "maintenance2@insta-maintain.com",
    "hvac1@insta-maintain.com",
    "hvac2@insta-maintain.com",
)


class RoutingConfig(BaseModel):
    """
    Immutable routing tables.
    Keywords and emails are lower-cased on construction; a default category
    that is not declared, or an empty contractor pool, is rejected.
    """
    model_config = ConfigDict(frozen=True, validate_default=True)

    categories: Tuple[CategoryProfile, ...] = DEFAULT_CATEGORIES
    contractor_pools: Mapping[str, Tuple[str, ...]] = Field(
        default_factory=lambda: dict(DEFAULT_CONTRACTOR_POOLS)
    )
    admin_emails: FrozenSet[str] = frozenset(DEFAULT_ADMIN_EMAILS)
    contractor_emails: FrozenSet[str] = frozenset(DEFAULT_CONTRACTOR_EMAILS)
    default_category: str = DEFAULT_CATEGORY
    fallback_pool: Tuple[str, ...] = (GENERIC_CONTRACTOR,)

    @field_validator("admin_emails", "contractor_emails", mode="before")
    @classmethod
    def normalize_emails(cls, emails: Any) -> FrozenSet[str]:
        return frozenset(_clean_emails(emails or ()))

    @field_validator("fallback_pool", mode="before")
    @classmethod
    def normalize_fallback(cls, pool: Any) -> Tuple[str, ...]:
        return _clean_emails(pool or ())

    @field_validator("contractor_pools", mode="before")
    @classmethod
    def normalize_pools(cls, pools: Any) -> Dict[str, Tuple[str, ...]]:
        if not isinstance(pools, Mapping):
            return pools
        return {name: _clean_emails(members) for name, members in pools.items()}

    @field_validator("contractor_pools")
    @classmethod
    def freeze_pools(cls, pools: Mapping[str, Tuple[str, ...]]) -> Mapping[str, Tuple[str, ...]]:
        return MappingProxyType(dict(pools))

    @model_validator(mode="after")
    def check_tables(self) -> "RoutingConfig":
        if not self.categories:
            raise ValueError("at least one category is required")
        if self.default_category not in self.category_names:
            raise ValueError(f"default category {self.default_category!r} is not a configured category")
        for name, members in self.contractor_pools.items():
            if not members:
                raise ValueError(f"contractor pool for {name!r} is empty")
        if not self.fallback_pool:
            raise ValueError("fallback pool is empty")
        return self

    def category(self, name: str) -> Optional[CategoryProfile]:
        for profile in self.categories:
            if profile.name == name:
                return profile
        return None

    @property
    def category_names(self) -> Tuple[str, ...]:
        return tuple(profile.name for profile in self.categories)


def load_routing_config(settings) -> RoutingConfig:
    """Freeze the routing tables from application settings.

    Allow-lists given in the environment replace the built-in ones; the
    category table and contractor pools are fixed.
    """
    return RoutingConfig(
        admin_emails=settings.admin_emails or DEFAULT_ADMIN_EMAILS,
        contractor_emails=settings.contractor_emails or DEFAULT_CONTRACTOR_EMAILS,
    )
