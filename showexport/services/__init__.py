"""
Export services.
"""
