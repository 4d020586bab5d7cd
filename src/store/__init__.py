"""Ledger storage layer.

This package appends validated records to per-user ledger files.
"""
