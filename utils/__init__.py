"""
Shared helpers for the TrueFrame API layer
"""
