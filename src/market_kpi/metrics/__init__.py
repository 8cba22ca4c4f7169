"""KPI computation over a resolved record set (totals, CAGR, growth)."""
