"""Rule engine evaluating label matchers against a pull request."""

import re
from dataclasses import dataclass
from typing import Protocol

from ..exceptions import ConfigurationError
from ..models import LabelerConfig, LabelMatcher, LabelSet, PullRequestAttributes


class Condition(Protocol):
    """A single constraint a matcher places on the pull request."""

    def holds(self, attributes: PullRequestAttributes) -> bool: ...


@dataclass(frozen=True)
class TitleCondition:
    pattern: re.Pattern

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return self.pattern.search(attributes.title) is not None


@dataclass(frozen=True)
class BranchCondition:
    pattern: re.Pattern

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return self.pattern.search(attributes.branch_name) is not None


@dataclass(frozen=True)
class MergeableCondition:
    expected: bool

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return attributes.mergeable is self.expected


@dataclass(frozen=True)
class SizeBelowCondition:
    threshold: int

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return attributes.diff_size < self.threshold


@dataclass(frozen=True)
class SizeAboveCondition:
    threshold: int

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return attributes.diff_size > self.threshold


@dataclass(frozen=True)
class FilesCondition:
    """Satisfied when any changed file matches any of the patterns."""

    patterns: tuple[re.Pattern, ...]

    def holds(self, attributes: PullRequestAttributes) -> bool:
        return any(
            pattern.search(path) is not None
            for path in attributes.changed_files
            for pattern in self.patterns
        )


@dataclass(frozen=True)
class CompiledMatcher:
    label: str
    conditions: tuple[Condition, ...]

    def matches(self, attributes: PullRequestAttributes) -> bool:
        """Check every condition; a matcher without conditions never matches."""
        if not self.conditions:
            return False
        return all(condition.holds(attributes) for condition in self.conditions)


def _compile_pattern(label: str, field: str, pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        msg = f"Invalid {field} pattern {pattern!r} for label {label!r}: {e}"
        raise ConfigurationError(msg) from e


def _parse_threshold(label: str, field: str, value: int | str) -> int:
    if isinstance(value, bool):
        msg = f"Invalid {field} threshold {value!r} for label {label!r}"
        raise ConfigurationError(msg)
    try:
        return int(str(value).strip())
    except ValueError as e:
        msg = f"Invalid {field} threshold {value!r} for label {label!r}"
        raise ConfigurationError(msg) from e


def _parse_mergeable(label: str, value: str) -> bool:
    if value == "True":
        return True
    if value == "False":
        return False
    msg = f"Invalid mergeable value {value!r} for label {label!r}, expected 'True' or 'False'"
    raise ConfigurationError(msg)


def compile_matcher(matcher: LabelMatcher) -> CompiledMatcher:
    """Turn the specified fields of a matcher into conditions.

    Raises:
    ------
        ConfigurationError: If a pattern, threshold or mergeable value is malformed

    """
    label = matcher.label
    conditions: list[Condition] = []

    if matcher.title:
        conditions.append(TitleCondition(_compile_pattern(label, "title", matcher.title)))
    if matcher.branch:
        conditions.append(BranchCondition(_compile_pattern(label, "branch", matcher.branch)))
    if matcher.mergeable:
        conditions.append(MergeableCondition(_parse_mergeable(label, matcher.mergeable)))
    if matcher.size_below not in (None, ""):
        conditions.append(SizeBelowCondition(_parse_threshold(label, "size-below", matcher.size_below)))
    if matcher.size_above not in (None, ""):
        conditions.append(SizeAboveCondition(_parse_threshold(label, "size-above", matcher.size_above)))
    if matcher.files:
        patterns = tuple(_compile_pattern(label, "files", pattern) for pattern in matcher.files)
        conditions.append(FilesCondition(patterns))

    return CompiledMatcher(label=label, conditions=tuple(conditions))


def compile_config(config: LabelerConfig) -> tuple[CompiledMatcher, ...]:
    """Validate a configuration and compile all of its matchers up front.

    Raises:
    ------
        ConfigurationError: If the version is unsupported or any matcher is malformed

    """
    if not config.is_supported_version:
        msg = f"Unsupported labeler config version: {config.version}"
        raise ConfigurationError(msg)
    return tuple(compile_matcher(matcher) for matcher in config.matchers)


def evaluate(config: LabelerConfig, attributes: PullRequestAttributes) -> LabelSet:
    """Compute the labels whose matchers are satisfied by the pull request.

    Matchers sharing a label combine with OR semantics.
    """
    compiled = compile_config(config)
    return frozenset(matcher.label for matcher in compiled if matcher.matches(attributes))
