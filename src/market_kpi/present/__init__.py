"""Display helpers: number formatting and KPI card text.

Nothing here feeds back into computation; formatting happens only when a
`KpiResult` is rendered.
"""
