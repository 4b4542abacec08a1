"""FastAPI routes for the PR labeler webhook."""

import hashlib
import hmac
import json
from functools import lru_cache
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from pr_labeler.config import get_settings
from pr_labeler.exceptions import ConfigurationError, EventPayloadError, GitHubAPIError
from pr_labeler.github.backend import GitHubLabelerBackend
from pr_labeler.services.event_extractor import is_relevant_action, repository_coordinates
from pr_labeler.services.labeler import PULL_REQUEST_EVENTS, Labeler, LabelingResult, decode_payload
from pr_labeler.utils import get_logger

logger = get_logger(__name__)
router = APIRouter()


# Dependency to get the GitHub backend; one HTTP session and one set of
# rate limit counters for the whole process
@lru_cache()
def get_backend() -> GitHubLabelerBackend:
    """Get GitHub labeler backend."""
    return GitHubLabelerBackend()


def close_backend() -> None:
    """Close the shared backend, if one was created."""
    if get_backend.cache_info().currsize:
        get_backend().close()
        get_backend.cache_clear()


def get_webhook_secret() -> str | None:
    """Get the secret used to sign webhook deliveries."""
    return get_settings().github_webhook_secret


def verify_signature(body: bytes, secret: str, signature: str | None) -> bool:
    """Check an ``X-Hub-Signature-256`` header against the request body."""
    if not signature:
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def _with_changed_files(payload: dict[str, Any], backend: GitHubLabelerBackend) -> dict[str, Any]:
    """Add the changed file list to a pull request payload that lacks one."""
    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict) or "files" in pull_request:
        return payload
    if not is_relevant_action(payload.get("action")):
        return payload

    owner, repo_name = repository_coordinates(payload)
    files = backend.get_changed_files(owner, repo_name, pull_request.get("number"))
    return {**payload, "pull_request": {**pull_request, "files": files}}


def process_event(event_kind: str, body: bytes, backend: GitHubLabelerBackend) -> LabelingResult | None:
    """Enrich and label one pull request event; blocks on GitHub API calls."""
    payload = _with_changed_files(decode_payload(body), backend)
    return Labeler(backend).handle_event(event_kind, json.dumps(payload))


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    settings = get_settings()
    return {
        "message": "PR Labeler API",
        "version": settings.app_version,
        "endpoints": {
            "webhook": "/webhook",
        },
    }


@router.post("/webhook")
async def github_webhook(
    request: Request,
    backend: Annotated[GitHubLabelerBackend, Depends(get_backend)],
    secret: Annotated[str | None, Depends(get_webhook_secret)],
    x_github_event: Annotated[str | None, Header()] = None,
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> dict[str, Any]:
    """Receive a GitHub webhook delivery and reconcile pull request labels."""
    body = await request.body()

    if secret and not verify_signature(body, secret, x_hub_signature_256):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    if not x_github_event:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

    if x_github_event not in PULL_REQUEST_EVENTS:
        return {"status": "ignored", "event": x_github_event}

    try:
        result = await run_in_threadpool(process_event, x_github_event, body, backend)

    except EventPayloadError as e:
        logger.warning("Rejected %s event: %s", x_github_event, e)
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ConfigurationError as e:
        logger.warning("Invalid labeler config: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e
    except GitHubAPIError as e:
        logger.exception("GitHub API call failed")
        raise HTTPException(status_code=502, detail=str(e)) from e

    if result is None:
        return {"status": "ignored", "event": x_github_event}

    return {
        "status": "updated" if result.changed else "unchanged",
        "repository": f"{result.owner}/{result.repo_name}",
        "number": result.number,
        "labels": sorted(result.labels),
        "added": sorted(result.added),
        "removed": sorted(result.removed),
    }
