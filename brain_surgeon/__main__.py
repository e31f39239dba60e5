"""
Main entry point for brain-surgeon.

This allows the package to be run as a module:
python -m brain_surgeon
"""

from .cli.commands import main

if __name__ == '__main__':
    main()
