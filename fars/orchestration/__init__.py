"""
Multi-year loading workflows.

Coordinates filename resolution and record loading across a sequence of years,
isolating failures so one bad year never aborts the batch.
"""
