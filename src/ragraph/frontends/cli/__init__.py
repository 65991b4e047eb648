"""Command line interface for ragraph.

Commands:
    ragraph ask     Ask a question through a one-node chat agent graph
    ragraph demo    Run the offline conditional routing demo
"""

from ragraph.frontends.cli.main import main

__all__ = ["main"]
