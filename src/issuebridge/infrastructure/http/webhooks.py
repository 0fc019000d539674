"""Webhook endpoints for GitHub issue comments and Mailgun inbound email."""

from __future__ import annotations

import hashlib
import hmac
import json

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from loguru import logger

from issuebridge.application.use_cases.dispatch_reply import BridgeDispatcher
from issuebridge.domain.errors import MalformedSourceError
from issuebridge.infrastructure.settings import Settings

router = APIRouter()

SUPPORTED_GITHUB_EVENT = "issue_comment"


# ============================================================================
# Dependencies
# ============================================================================


def get_dispatcher(request: Request) -> BridgeDispatcher:
    return request.app.state.dispatcher


def get_bridge_settings(request: Request) -> Settings:
    return request.app.state.settings


# ============================================================================
# Signature checks
# ============================================================================


def verify_github_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check GitHub's ``X-Hub-Signature-256`` header against the raw body."""
    if not signature or not signature.startswith("sha256="):
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature.removeprefix("sha256="))


def verify_mailgun_signature(signing_key: str, timestamp: str, token: str, signature: str) -> bool:
    """Check a Mailgun webhook signature (HMAC-SHA256 of timestamp + token)."""
    if not (timestamp and token and signature):
        return False
    expected = hmac.new(
        signing_key.encode("utf-8"),
        f"{timestamp}{token}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, signature)


# ============================================================================
# Endpoints
# ============================================================================


@router.post("/github")
async def github_webhook(
    request: Request,
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_bridge_settings),
    x_github_event: str = Header(default=""),
    x_hub_signature_256: str | None = Header(default=None),
    content_type: str = Header(default=""),
) -> dict:
    """
    Receive an issue comment webhook and forward it as an email.

    Ping events are acknowledged, other event types are rejected and only
    JSON payloads are accepted.
    """
    body = await request.body()

    if settings.github_webhook_secret is not None:
        secret = settings.github_webhook_secret.get_secret_value()
        if not verify_github_signature(secret, body, x_hub_signature_256):
            logger.warning("GitHub webhook signature mismatch")
            raise HTTPException(status_code=401, detail="Unauthorized")

    if x_github_event == "ping":
        logger.info("GitHub pinged us")
        return {"status": "pong"}

    if x_github_event != SUPPORTED_GITHUB_EVENT:
        logger.error(f"GitHub event not supported: {x_github_event!r}")
        raise HTTPException(status_code=400, detail=f"Unsupported event: {x_github_event}")

    if "json" not in content_type:
        logger.error("Only JSON payloads are supported")
        raise HTTPException(status_code=406, detail="Only JSON payloads are supported")

    try:
        payload = json.loads(body)
    except ValueError as e:
        raise MalformedSourceError(f"Payload is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedSourceError("Payload is not a JSON object")

    result = await run_in_threadpool(dispatcher.handle_tracker_event, payload)
    return result.as_dict()


@router.post("/mailgun")
async def mailgun_webhook(
    request: Request,
    dispatcher: BridgeDispatcher = Depends(get_dispatcher),
    settings: Settings = Depends(get_bridge_settings),
) -> dict:
    """Receive a routed inbound email and forward it as an issue comment."""
    form = await request.form()
    fields = {key: form.getlist(key) for key in form.keys()}

    if settings.mailgun_webhook_signing_key is not None:
        key = settings.mailgun_webhook_signing_key.get_secret_value()
        if not verify_mailgun_signature(
            key,
            str(form.get("timestamp") or ""),
            str(form.get("token") or ""),
            str(form.get("signature") or ""),
        ):
            logger.warning("Mailgun webhook signature mismatch")
            raise HTTPException(status_code=401, detail="Unauthorized")

    result = await run_in_threadpool(dispatcher.handle_email_event, fields)
    return result.as_dict()


@router.get("/health")
async def health(request: Request) -> dict:
    """Health check: store reachability and correlation count."""
    store = request.app.state.store
    settings = request.app.state.settings
    try:
        count = await run_in_threadpool(store.count)
        return {
            "status": "healthy",
            "correlations": count,
            "dry_run": settings.dry_run,
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
        }
