"""Reconciliation of computed labels with the labels already applied."""

from collections.abc import Iterable

from ..models import LabelSet


def reconcile(desired: Iterable[str], current: Iterable[str], managed: Iterable[str]) -> LabelSet:
    """Compute the label set to apply to a pull request.

    Labels the rules selected are always present. Labels no matcher governs
    are kept as they are, while governed labels that did not match are
    dropped.

    Args:
    ----
        desired: Labels selected by the rule engine
        current: Labels currently on the pull request
        managed: Labels governed by the active configuration

    Returns:
    -------
        The final label set

    """
    return frozenset(desired) | (frozenset(current) - frozenset(managed))
