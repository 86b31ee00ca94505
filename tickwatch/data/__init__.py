"""
Price sample ingestion module.

Immutable sample models, the bounded ring buffer that holds per-ticker
history, input validation and parsing of raw price source payloads.
"""
