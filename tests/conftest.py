"""Test configuration and fixtures."""

import json
import os
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

# Set environment variables immediately when this module is imported
# This ensures they're available before any other modules try to load Settings
test_env_vars = {
    "GITHUB_TOKEN": "test_github_token_123",
    "GITHUB_API_BASE_URL": "https://api.github.com",
    "GITHUB_WEBHOOK_SECRET": "",
    "LABELER_CONFIG_PATH": ".github/labeler.yml",
    "APP_NAME": "PR Labeler Test",
    "APP_VERSION": "1.0.0-test",
    "DEBUG": "true",
    "HOST": "127.0.0.1",
    "PORT": "8000",
    "LOG_LEVEL": "DEBUG",
}

for key, value in test_env_vars.items():
    os.environ[key] = value

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    yield

    for key in test_env_vars:
        os.environ.pop(key, None)


def load_payload(name: str) -> bytes:
    """Read a recorded pull_request webhook payload."""
    return (FIXTURES_DIR / f"{name}.json").read_bytes()


@pytest.fixture
def payload_loader() -> Callable[[str], bytes]:
    return load_payload


@pytest.fixture
def pull_request_event() -> dict[str, Any]:
    """A decoded pull_request event whose title marks it as work in progress."""
    return json.loads(load_payload("create_pr"))


class FakeCollaborators:
    """In-memory stand-in for the GitHub backend that records replace calls."""

    def __init__(self, config: Any, labels: Iterable[str] = ()) -> None:
        self.config = config
        self.labels = list(labels)
        self.replaced: list[tuple[str, str, int, frozenset[str]]] = []
        self.config_requests: list[tuple[str, str]] = []

    def fetch_repo_config(self, owner: str, repo_name: str) -> Any:
        self.config_requests.append((owner, repo_name))
        return self.config

    def get_current_labels(self, owner: str, repo_name: str, pr_number: int) -> list[str]:
        return list(self.labels)

    def replace_labels_for_pr(self, owner: str, repo_name: str, pr_number: int, labels: frozenset[str]) -> None:
        self.replaced.append((owner, repo_name, pr_number, frozenset(labels)))
        self.labels = sorted(labels)


@pytest.fixture
def fake_collaborators() -> Callable[..., FakeCollaborators]:
    return FakeCollaborators
