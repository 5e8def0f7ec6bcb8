"""Fare computation and temporal pricing rule evaluation for rideshare tiers."""

__version__ = "0.1.0"
