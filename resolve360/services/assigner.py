# resolve360/services/assigner.py
import logging
import random
from typing import Optional, Tuple

from .catalog import RoutingConfig

logger = logging.getLogger(__name__)

class ContractorAssigner:
    """
    Picks a contractor for a category.
    Selection is a uniform random choice over the category's pool, so callers
    should only rely on the result being a pool member. Pass a seeded
    ``random.Random`` (or anything with ``choice``) for repeatable picks.
    """

    def __init__(self, config: RoutingConfig, rng: Optional[random.Random] = None):
        self.config = config
        self.rng = rng or random.Random()

    def pool_for(self, category: str) -> Tuple[str, ...]:
        pool = self.config.contractor_pools.get(category)
        if not pool:
            logger.warning(f"No contractor pool for category {category!r}, using generic pool")
            return self.config.fallback_pool
        return pool

    def assign(self, category: str) -> str:
        contractor = self.rng.choice(self.pool_for(category))
        logger.info(f"Assigned {contractor} to {category} issue")
        return contractor
