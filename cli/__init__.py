"""
Rewind CLI - inspect exported lifted-state history

Commands:
- rewind verify - Refold an export and check its cached states
- rewind summary - Counts and hash for an export
- rewind version
"""

__version__ = "0.1.0"
