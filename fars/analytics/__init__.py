"""
Aggregation of loaded accident records into summary tables.

Includes the group-and-pivot that turns per-year record sets into a
month-by-year fatality count table.
"""
