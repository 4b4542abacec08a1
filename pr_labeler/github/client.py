"""GitHub API client for reading labeler configs and managing pull request labels."""

import base64
import time
from typing import Any
from urllib.parse import quote, urljoin

import requests

from pr_labeler.config import get_github_headers, get_settings
from pr_labeler.exceptions import ConfigurationError, GitHubAPIError
from pr_labeler.utils import get_logger

logger = get_logger(__name__)


class GitHubAPIClient:
    """GitHub API client with rate limiting and error handling."""

    def __init__(self, access_token: str | None = None, base_url: str | None = None) -> None:
        """Initialize GitHub API client.

        Args:
        ----
            access_token: GitHub token used for authentication
            base_url: API root, defaults to the configured GitHub API URL

        """
        settings = get_settings()
        self.access_token = access_token or settings.github_token
        self.base_url = (base_url or settings.github_api_base_url).rstrip("/") + "/"
        self.timeout = settings.github_request_timeout
        self.session = requests.Session()
        self.session.headers.update(get_github_headers(self.access_token))

        if not self.access_token:
            logger.warning("No GitHub token provided, using unauthenticated requests")

        # Rate limiting
        self.rate_limit_remaining = None
        self.rate_limit_reset = None
        self.last_request_time = 0

        # Request delay to avoid hitting rate limits
        self.request_delay = 0.1

    def _check_rate_limit(self) -> None:
        """Check rate limit status and wait if necessary."""
        if self.rate_limit_remaining is not None and self.rate_limit_remaining <= 0:
            if self.rate_limit_reset:
                wait_time = self.rate_limit_reset - time.time()
                if wait_time > 0:
                    logger.info("Rate limit exceeded, waiting %.1f seconds", wait_time)
                    time.sleep(wait_time + 1)  # Add 1 second buffer
            else:
                logger.info("Rate limit exceeded, waiting 60 seconds")
                time.sleep(60)

        # Enforce minimum delay between requests
        time_since_last_request = time.time() - self.last_request_time
        if time_since_last_request < self.request_delay:
            time.sleep(self.request_delay - time_since_last_request)

        self.last_request_time = time.time()

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:  # noqa: ANN401
        """Make HTTP request with rate limiting and error handling.

        Args:
        ----
            method: HTTP method (GET, PUT, etc.)
            url: Request URL, absolute or relative to the API root
            **kwargs: Additional request parameters

        Returns:
        -------
            requests.Response: Response object

        Raises:
        ------
            GitHubAPIError: If the request fails or returns an error status

        """
        self._check_rate_limit()

        if not url.startswith(("http://", "https://")):
            url = urljoin(self.base_url, url.lstrip("/"))

        kwargs.setdefault("timeout", self.timeout)
        logger.debug("Making %s request to %s", method, url)

        try:
            response = self.session.request(method, url, **kwargs)

            if "X-RateLimit-Remaining" in response.headers:
                self.rate_limit_remaining = int(response.headers["X-RateLimit-Remaining"])

            if "X-RateLimit-Reset" in response.headers:
                self.rate_limit_reset = int(response.headers["X-RateLimit-Reset"])

            response.raise_for_status()
            return response

        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.warning("%s %s failed with status %s", method, url, status_code)
            msg = f"{method} {url} failed with status {status_code}"
            raise GitHubAPIError(msg, status_code=status_code) from e
        except requests.RequestException as e:
            logger.exception("Request failed")
            msg = f"{method} {url} failed: {e}"
            raise GitHubAPIError(msg) from e

    def _get_paginated_results(self, url: str, params: dict | None = None) -> list[dict]:
        """Get all results from paginated endpoint.

        Args:
        ----
            url: API endpoint URL
            params: Query parameters

        Returns:
        -------
            List of all results

        """
        all_results = []
        page = 1
        per_page = 100  # Maximum allowed by GitHub

        while True:
            request_params = params.copy() if params else {}
            request_params.update({
                "page": page,
                "per_page": per_page,
            })

            response = self._make_request("GET", url, params=request_params)
            results = response.json()

            if not results:
                break

            all_results.extend(results)

            # Fewer results than requested means this was the last page
            if len(results) < per_page:
                break

            page += 1

        return all_results

    def get_file_content(self, owner: str, repo: str, path: str, ref: str | None = None) -> str | None:
        """Get the decoded contents of a repository file.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            path: File path inside the repository
            ref: Branch, tag or commit, defaults to the default branch

        Returns:
        -------
            File contents, or ``None`` if the file does not exist

        """
        url = f"/repos/{owner}/{repo}/contents/{quote(path.lstrip('/'))}"
        params = {"ref": ref} if ref else None

        try:
            response = self._make_request("GET", url, params=params)
        except GitHubAPIError as e:
            if e.status_code == 404:
                return None
            raise

        data = response.json()
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            msg = f"{path} in {owner}/{repo} is not a file"
            raise ConfigurationError(msg)
        if data.get("encoding") == "base64":
            return base64.b64decode(data.get("content", "")).decode("utf-8")
        return data.get("content")

    def get_issue_labels(self, owner: str, repo: str, issue_number: int) -> list[str]:
        """Get the names of the labels on an issue or pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            issue_number: Issue/PR number

        Returns:
        -------
            List of label names

        """
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/labels"

        return [label["name"] for label in self._get_paginated_results(url)]

    def replace_issue_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> list[str]:
        """Replace all labels on an issue or pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            issue_number: Issue/PR number
            labels: Complete list of label names to set

        Returns:
        -------
            Label names reported by GitHub after the update

        """
        url = f"/repos/{owner}/{repo}/issues/{issue_number}/labels"

        response = self._make_request("PUT", url, json={"labels": labels})
        return [label["name"] for label in response.json()]

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> list[str]:
        """Get the paths of files changed in a pull request.

        Args:
        ----
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
        -------
            List of file paths

        """
        url = f"/repos/{owner}/{repo}/pulls/{pr_number}/files"

        return [entry["filename"] for entry in self._get_paginated_results(url)]

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
