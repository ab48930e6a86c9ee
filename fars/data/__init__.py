"""
Data I/O, filename resolution, and the accident-file column contract.

Handles deriving per-year file names, reading compressed accident CSVs, and
writing summary tables.
"""
