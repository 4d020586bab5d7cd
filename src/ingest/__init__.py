"""Daily transaction ingestion.

This package validates source rows and reads each day's records
from the input directory for the ledger writer.
"""
