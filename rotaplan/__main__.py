"""
Package entry point.

Allows running the application via:

    python -m rotaplan

This simply forwards execution to rotaplan.cli.main().
"""

from rotaplan.cli import main

if __name__ == "__main__":
    main()
