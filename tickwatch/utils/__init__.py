"""
Utility functions module.

Time Semantics:
- Sample timestamps handed in by the price source are authoritative
- Wall-clock time is only used for scheduling
- Day boundaries for day low/high are evaluated in each timestamp's own timezone
"""
