"""
CLI command modules.
"""

from proofview_cli.commands import check, key

__all__ = ["check", "key"]
