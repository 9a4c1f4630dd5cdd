"""Hit list ingestion.

This package reads text hit lists and drives the conversion pass
from raw records to a finalized particle container.
"""
