"""Swarm ledger: staking, hatching and hive raids over an async SQL store."""

__version__ = "0.1.0"
