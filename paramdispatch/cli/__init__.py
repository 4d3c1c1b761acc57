# CLI package for paramdispatch
"""
Read-only CLI over a sample component tree.

Commands:
    paramdispatch names: Show handled parameter names
    paramdispatch apply: Distribute parameters and show results
"""
