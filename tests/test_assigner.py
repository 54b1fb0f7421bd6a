"""
Unit Tests - Contractor Assignment
==================================
Assignment is random, so these tests check pool membership and coverage
rather than a specific contractor.
"""
import random

import pytest
from pydantic import ValidationError

from resolve360.services.assigner import ContractorAssigner
from resolve360.services.catalog import GENERIC_CONTRACTOR, RoutingConfig


class LastChoice:
    """Deterministic stand-in for random.Random."""

    def choice(self, seq):
        return seq[-1]


@pytest.mark.parametrize("category", [
    "Plumbing", "Electrical", "Civil", "Common Area Maintenance/Housekeeping", "HVAC",
])
def test_assign_returns_pool_member(routing_config, category):
    assigner = ContractorAssigner(routing_config, rng=random.Random(7))
    pool = routing_config.contractor_pools[category]
    for _ in range(50):
        assert assigner.assign(category) in pool


@pytest.mark.parametrize("category", [
    "Plumbing", "Electrical", "Civil", "Common Area Maintenance/Housekeeping", "HVAC",
])
def test_every_pool_member_gets_picked(routing_config, category):
    assigner = ContractorAssigner(routing_config, rng=random.Random(1234))
    picked = {assigner.assign(category) for _ in range(200)}
    assert picked == set(routing_config.contractor_pools[category])


def test_injected_random_source(routing_config):
    assigner = ContractorAssigner(routing_config, rng=LastChoice())
    assert assigner.assign("HVAC") == "hvac2@resolve360.com"


def test_unknown_category_uses_generic_pool(routing_config):
    assigner = ContractorAssigner(routing_config)
    assert assigner.pool_for("Roofing") == (GENERIC_CONTRACTOR,)
    assert assigner.assign("Roofing") == GENERIC_CONTRACTOR


def test_single_member_pool_is_deterministic():
    config = RoutingConfig(contractor_pools={"Plumbing": ["Solo@MapleCourt.org"]})
    assigner = ContractorAssigner(config)
    assert {assigner.assign("Plumbing") for _ in range(10)} == {"solo@maplecourt.org"}


def test_empty_pool_rejected():
    with pytest.raises(ValidationError, match="pool for 'Plumbing' is empty"):
        RoutingConfig(contractor_pools={"Plumbing": []})


def test_pool_emails_are_lower_cased():
    config = RoutingConfig(contractor_pools={"Plumbing": [" Pipes@MapleCourt.org ", "DRAINS@maplecourt.org"]})
    assert ContractorAssigner(config).pool_for("Plumbing") == ("pipes@maplecourt.org", "drains@maplecourt.org")
