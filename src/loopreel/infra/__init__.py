"""
Infrastructure layer - settings, logging and the exception hierarchy.
"""
