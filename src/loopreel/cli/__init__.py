"""
Command-line interface for loopreel.
"""
