"""Game domain services: scoring, achievements, challenges, shop, stats.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game rules.
"""
