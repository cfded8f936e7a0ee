"""Dual DB Sync examples.

Run any example directly:
    python examples/dual_write_example.py
"""
