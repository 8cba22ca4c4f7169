"""market_kpi package.

Computes headline market KPIs (market size at the start and end of the
forecast period, CAGR, absolute growth) from a hierarchical market-research
dataset for a given filter state.

Architecture:
- Store: pydantic models for the already-loaded dataset plus a JSON loader
- Selection: ordered fallback tiers that pick a non-overlapping record set
- Metrics: totals, growth rates and display-unit resolution
- Present: number formatting and KPI card text
- Export: client for the external dashboard packaging service
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
