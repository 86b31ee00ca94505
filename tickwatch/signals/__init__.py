"""
Signal classification and event emission module.

Turns indicator readings into BUY/SELL/NEUTRAL and publishes structured
ticker events to subscribers.
"""
