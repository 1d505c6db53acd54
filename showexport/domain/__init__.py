"""
Domain models and collaborator interfaces.
"""
