"""
Infrastructure adapters.
"""
