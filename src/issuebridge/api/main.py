"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from issuebridge.application.identity import IdentityResolver
from issuebridge.application.use_cases.dispatch_reply import BridgeDispatcher
from issuebridge.domain.errors import BridgeError
from issuebridge.infrastructure import (
    GitHubClient,
    MailgunSender,
    Settings,
    SQLiteCorrelationStore,
    get_settings,
)


def build_dispatcher(settings: Settings, store: SQLiteCorrelationStore) -> BridgeDispatcher:
    """Wire the GitHub and Mailgun adapters into a dispatcher."""
    github = GitHubClient(
        token=settings.github_token.get_secret_value() if settings.github_token else None,
        owner=settings.github_owner,
        repo=settings.github_repo,
        base_url=settings.github_api_url,
        timeout=settings.http_timeout_seconds,
    )
    mailgun = MailgunSender(
        domain=settings.mailgun_domain,
        api_key=settings.mailgun_api_key.get_secret_value() if settings.mailgun_api_key else None,
        base_url=settings.mailgun_api_url,
        timeout=settings.http_timeout_seconds,
    )
    identity = IdentityResolver(
        github,
        ttl_seconds=settings.identity_cache_ttl_seconds,
        hard_expiry_seconds=settings.identity_cache_hard_expiry_seconds,
    )
    return BridgeDispatcher(
        identity=identity,
        email_sender=mailgun,
        tracker=github,
        store=store,
        sender_address=settings.sender_address,
        dry_run=settings.dry_run,
    )


def log_correlations(store: SQLiteCorrelationStore) -> None:
    """Verify the store and log what it holds."""
    if not store.verify():
        logger.error("Correlation store failed its integrity check")
    entries = store.list_all()
    logger.info(f"Correlation store holds {len(entries)} entries")
    for entry in entries:
        logger.debug(f"  {entry.message_id} -> #{entry.issue_number}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Dry run: {settings.dry_run}")

    owns_store = getattr(app.state, "store", None) is None
    if owns_store:
        app.state.store = SQLiteCorrelationStore(settings.correlation_db_path)
    log_correlations(app.state.store)

    owns_dispatcher = getattr(app.state, "dispatcher", None) is None
    if owns_dispatcher:
        app.state.dispatcher = build_dispatcher(settings, app.state.store)

    logger.info(f"Listening for GitHub webhooks on {settings.listen_addr}/github")
    logger.info(f"Listening for Mailgun webhooks on {settings.listen_addr}/mailgun")

    yield

    logger.info("Shutting down...")
    if owns_dispatcher:
        app.state.dispatcher.email_sender.close()
        app.state.dispatcher.tracker.close()
    if owns_store:
        app.state.store.close()
    logger.info("Shutdown complete")


async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    """Map request-scoped bridge errors to HTTP responses."""
    message = f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}"
    if exc.status_code >= 500:
        logger.error(message)
    else:
        logger.warning(message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc), "kind": type(exc).__name__},
    )


def create_app(
    settings: Settings | None = None,
    store: SQLiteCorrelationStore | None = None,
    dispatcher: BridgeDispatcher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``store`` and ``dispatcher`` are built during startup unless given.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Bridge GitHub issue comments and email replies",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = dispatcher

    app.add_exception_handler(BridgeError, bridge_error_handler)

    from issuebridge.infrastructure.http.webhooks import router

    app.include_router(router)

    return app


# Create app instance
app = create_app()
