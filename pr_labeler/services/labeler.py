"""Orchestration of a single pull request labeling pass."""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from ..exceptions import EventPayloadError
from ..models import LabelerConfig, LabelSet
from ..utils import get_logger
from .event_extractor import extract_attributes, repository_coordinates
from .reconciler import reconcile
from .rule_engine import evaluate

logger = get_logger(__name__)

PULL_REQUEST_EVENTS = frozenset({"pull_request", "pull_request_target"})


class LabelerCollaborators(Protocol):
    """Side-effecting operations the labeler relies on.

    Implementations raise on failure; the labeler does not retry.
    """

    def fetch_repo_config(self, owner: str, repo_name: str) -> LabelerConfig | None: ...

    def get_current_labels(self, owner: str, repo_name: str, pr_number: int) -> Iterable[str]: ...

    def replace_labels_for_pr(self, owner: str, repo_name: str, pr_number: int, labels: LabelSet) -> None: ...


@dataclass(frozen=True)
class LabelingResult:
    """Outcome of a labeling pass over one pull request."""

    owner: str
    repo_name: str
    number: int
    previous_labels: LabelSet
    labels: LabelSet

    @property
    def changed(self) -> bool:
        return self.labels != self.previous_labels

    @property
    def added(self) -> LabelSet:
        return self.labels - self.previous_labels

    @property
    def removed(self) -> LabelSet:
        return self.previous_labels - self.labels


def decode_payload(raw_payload: bytes | str) -> dict[str, Any]:
    """Decode a raw webhook body into a JSON object."""
    try:
        payload = json.loads(raw_payload)
    except (TypeError, ValueError) as e:
        msg = f"Event payload is not valid JSON: {e}"
        raise EventPayloadError(msg) from e
    if not isinstance(payload, dict):
        msg = "Event payload must be a JSON object"
        raise EventPayloadError(msg)
    return payload


class Labeler:
    """Applies a repository's label rules to pull request events."""

    def __init__(self, collaborators: LabelerCollaborators) -> None:
        """Initialize the labeler.

        Args:
        ----
            collaborators: Config/label fetching and label replacement backend

        """
        self.collaborators = collaborators

    def handle_event(self, event_kind: str, raw_payload: bytes | str) -> LabelingResult | None:
        """Process one webhook event.

        Args:
        ----
            event_kind: Value of the ``X-GitHub-Event`` header
            raw_payload: Raw JSON request body

        Returns:
        -------
            The labeling result, or ``None`` when the event required no work

        Raises:
        ------
            EventPayloadError: If the payload cannot be decoded
            ConfigurationError: If the repository configuration is invalid
            Exception: Any failure raised by the collaborators, unchanged

        """
        if event_kind not in PULL_REQUEST_EVENTS:
            logger.debug("Ignoring %s event", event_kind)
            return None

        payload = decode_payload(raw_payload)
        return self.handle_pull_request(payload)

    def handle_pull_request(self, payload: dict[str, Any]) -> LabelingResult | None:
        """Run fetch, evaluate, reconcile and replace for a decoded pull request event."""
        action = payload.get("action")
        owner, repo_name = repository_coordinates(payload)

        config = self.collaborators.fetch_repo_config(owner, repo_name)
        if config is None:
            logger.debug("No labeler config for %s/%s", owner, repo_name)
            return None

        attributes = extract_attributes(action, payload)
        if attributes is None:
            logger.debug("Ignoring pull_request action %s for %s/%s", action, owner, repo_name)
            return None

        desired = evaluate(config, attributes)
        current = frozenset(
            self.collaborators.get_current_labels(attributes.owner, attributes.repo_name, attributes.number),
        )
        final = reconcile(desired, current, config.managed_labels)

        result = LabelingResult(
            owner=attributes.owner,
            repo_name=attributes.repo_name,
            number=attributes.number,
            previous_labels=current,
            labels=final,
        )

        if not result.changed:
            logger.debug("Labels for %s already up to date", attributes)
            return result

        self.collaborators.replace_labels_for_pr(
            attributes.owner,
            attributes.repo_name,
            attributes.number,
            final,
        )
        logger.info(
            "Updated labels for %s: added %s, removed %s",
            attributes,
            sorted(result.added),
            sorted(result.removed),
        )
        return result
