"""
Core data and analytics layer.

This package contains:
- data_loader: read the wide survey CSV into a RawTable
- cleaner: neutral fill and rating range validation (CleanTable)
- reshaper: wide -> long pivot, with or without the distinguished item
- aggregator: per-item distribution, mean/median and rankings
- correlator: conditional mean of other items by distinguished rating
- pipeline: runs the stages above in order
- snapshot: headline facts derived from a pipeline result
"""
