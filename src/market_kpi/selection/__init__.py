"""Record selection.

Picks the subset of a geography/segment matrix whose values sum to the
requested total without double counting, relaxing the filter through an
ordered list of fallback tiers when the exact request has no data.
"""
