"""Stockroom: inventory ledger, demand forecasting and stock alerting."""

__version__ = "1.0.0"
