"""GitHub-backed implementation of the labeler collaborators."""

from collections.abc import Iterable

from pr_labeler.config import get_settings
from pr_labeler.config_loader import parse_labeler_config
from pr_labeler.models import LabelerConfig
from pr_labeler.utils import LoggerMixin

from .client import GitHubAPIClient


class GitHubLabelerBackend(LoggerMixin):
    """Reads configs and labels from GitHub and writes label changes back."""

    def __init__(self, client: GitHubAPIClient | None = None, config_path: str | None = None) -> None:
        self.client = client or GitHubAPIClient()
        self.config_path = config_path or get_settings().labeler_config_path

    def fetch_repo_config(self, owner: str, repo_name: str) -> LabelerConfig | None:
        content = self.client.get_file_content(owner, repo_name, self.config_path)
        if content is None:
            self.logger.info("%s/%s has no %s", owner, repo_name, self.config_path)
            return None
        return parse_labeler_config(content)

    def get_current_labels(self, owner: str, repo_name: str, pr_number: int) -> list[str]:
        return self.client.get_issue_labels(owner, repo_name, pr_number)

    def replace_labels_for_pr(self, owner: str, repo_name: str, pr_number: int, labels: Iterable[str]) -> None:
        self.client.replace_issue_labels(owner, repo_name, pr_number, sorted(labels))

    def get_changed_files(self, owner: str, repo_name: str, pr_number: int) -> list[str]:
        return self.client.get_pull_request_files(owner, repo_name, pr_number)

    def close(self) -> None:
        self.client.close()
