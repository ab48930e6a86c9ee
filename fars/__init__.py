"""
fars – yearly traffic-fatality summaries from FARS accident extracts.

Loads per-year ``accident_{year}.csv.bz2`` files, isolates per-year failures,
and pivots fatality counts into a month-by-year table.
"""

__version__ = "0.1.0"
