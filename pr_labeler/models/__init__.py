"""
Data models for the PR labeler
"""

from .labeler_config import SUPPORTED_CONFIG_VERSION, LabelerConfig, LabelMatcher
from .pull_request import LabelSet, PullRequestAttributes

__all__ = [
    "SUPPORTED_CONFIG_VERSION",
    "LabelerConfig",
    "LabelMatcher",
    "LabelSet",
    "PullRequestAttributes",
]
