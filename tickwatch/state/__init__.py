"""
Trend state machine and ticker state snapshots.

Tracks the UP/DOWN/NEUTRAL trend through break-of-structure (BOS) and
change-of-character (COC) transitions.
"""
