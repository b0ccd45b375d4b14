"""
SafeReport - anonymous incident reporting with operator triage.
"""

__version__ = "0.2.0"
