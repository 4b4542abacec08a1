"""
PR Labeler

A webhook service that keeps GitHub pull request labels in sync with a
declarative, per-repository set of matching rules.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
