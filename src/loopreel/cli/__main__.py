#!/usr/bin/env python3
"""
CLI entry point for loopreel.cli module.

This allows running: python -m loopreel.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
