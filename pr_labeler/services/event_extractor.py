"""Normalization of pull request webhook payloads."""

from typing import Any

from ..exceptions import EventPayloadError
from ..models import PullRequestAttributes

# Actions that can change the outcome of the labeling rules. Label changes
# themselves ("labeled"/"unlabeled") are excluded so our own replace call
# does not trigger another round.
RELEVANT_ACTIONS = frozenset({
    "opened",
    "reopened",
    "edited",
    "synchronize",
    "ready_for_review",
})


def is_relevant_action(action: str | None) -> bool:
    """Check whether a pull request action should trigger labeling."""
    return isinstance(action, str) and action in RELEVANT_ACTIONS


def _changed_files(pull_request: dict[str, Any]) -> frozenset[str]:
    files = pull_request.get("files") or []
    if not isinstance(files, list):
        msg = "Event payload field pull_request.files must be a list"
        raise EventPayloadError(msg)
    paths = set()
    for entry in files:
        if isinstance(entry, str):
            paths.add(entry)
        elif isinstance(entry, dict) and entry.get("filename"):
            paths.add(entry["filename"])
    return frozenset(paths)


def _mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Event payload field {what} must be an object"
        raise EventPayloadError(msg)
    return value


def _integer(value: Any, what: str) -> int:
    if isinstance(value, bool):
        msg = f"Event payload field {what} must be an integer"
        raise EventPayloadError(msg)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        msg = f"Event payload field {what} must be an integer"
        raise EventPayloadError(msg) from e


def repository_coordinates(payload: dict[str, Any]) -> tuple[str, str]:
    """Get the owner login and repository name of an event.

    Raises:
    ------
        EventPayloadError: If the repository object is missing or malformed

    """
    repository = _mapping(payload.get("repository"), "repository")
    owner = _mapping(repository.get("owner"), "repository.owner").get("login")
    repo_name = repository.get("name")
    if not isinstance(owner, str) or not owner or not isinstance(repo_name, str) or not repo_name:
        msg = "Event payload has no repository owner/name"
        raise EventPayloadError(msg)
    return owner, repo_name


def extract_attributes(action: str | None, payload: dict[str, Any]) -> PullRequestAttributes | None:
    """Build the attribute bundle for a pull request event.

    Args:
    ----
        action: The event action (``opened``, ``synchronize``, ...)
        payload: Decoded webhook payload

    Returns:
    -------
        The pull request attributes, or ``None`` when the action does not
        call for labeling.

    Raises:
    ------
        EventPayloadError: If the payload carries no pull request or repository,
            or one of the fields read here has the wrong shape

    """
    if not is_relevant_action(action):
        return None

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        msg = "Event payload has no pull_request object"
        raise EventPayloadError(msg)

    owner, repo_name = repository_coordinates(payload)

    number = pull_request.get("number", payload.get("number"))
    if number is None:
        msg = "Event payload has no pull request number"
        raise EventPayloadError(msg)

    title = pull_request.get("title") or ""
    branch_name = _mapping(pull_request.get("head"), "pull_request.head").get("ref") or ""
    if not isinstance(title, str) or not isinstance(branch_name, str):
        msg = "Event payload title and head ref must be strings"
        raise EventPayloadError(msg)

    additions = _integer(pull_request.get("additions") or 0, "pull_request.additions")
    deletions = _integer(pull_request.get("deletions") or 0, "pull_request.deletions")

    return PullRequestAttributes(
        owner=owner,
        repo_name=repo_name,
        number=_integer(number, "pull_request.number"),
        title=title,
        branch_name=branch_name,
        mergeable=pull_request.get("mergeable") is True,
        diff_size=additions + deletions,
        changed_files=_changed_files(pull_request),
    )
