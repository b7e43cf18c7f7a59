"""
Open Tasks: Composable Task CLI

Chains small commands (shell invocations, AI CLI wrappers, string transforms)
into tasks. Every command output is committed to a flow under a generated id
and an optional human-chosen token, so later commands can pick it up and the
operator can inspect it on disk after the run.
"""

__version__ = "1.0.0"
__author__ = "Open Tasks Team"
__description__ = "Composable task CLI with a reference-based workflow engine"
