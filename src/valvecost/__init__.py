"""Costing data model for manufactured valve assemblies."""

from .config import Config, load_config
from .consistency import ConsistencyIssue, check_consistency
from .models import BUY, MAKE, BulkRule, Material, ProcessSourcing, ProductConfig, RateEntry
from .rates import RateTable, apply_bulk_rule
from .resolver import RateResolver
from .seeding import build_initial_rates
from .session import CostingSession, create_session
from .sourcing import SourcingRegistry

__all__ = [
    "Config",
    "load_config",
    "ConsistencyIssue",
    "check_consistency",
    "MAKE",
    "BUY",
    "BulkRule",
    "Material",
    "ProcessSourcing",
    "ProductConfig",
    "RateEntry",
    "RateTable",
    "apply_bulk_rule",
    "RateResolver",
    "build_initial_rates",
    "CostingSession",
    "create_session",
    "SourcingRegistry",
]
