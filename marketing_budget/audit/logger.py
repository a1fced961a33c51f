"""
Audit Logger

DESIGN DECISION: Every write to budget or reference data is logged.
This provides:
1. Complete traceability of who changed what
2. A readable history per budget
3. Debugging capability

The audit logger:
- Writes each entry to the audit sink, retrying transient failures
- Always emits a structured local log line as well
- Never raises on sink failure: the domain write it describes has
  already succeeded and must not be undone. The failure is logged and
  handed to an optional callback so the caller can surface it.
"""

import logging
import sys
from typing import Any, Callable, Optional

import structlog
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from marketing_budget.config import get_settings
from marketing_budget.models.audit import AuditEntry
from marketing_budget.services.storage import AuditStorageInterface


def add_environment(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Tag every log line with the deployment environment."""
    event_dict.setdefault("environment", get_settings().app.app_environment)
    return event_dict


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structlog for local logging.

    Args:
        log_level: Minimum level name (default from settings)
    """
    level = log_level or get_settings().app.log_level

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_environment,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # filter_by_level defers to the stdlib logger's level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper()),
    )
    logging.getLogger().setLevel(level.upper())


configure_logging()


# Receives None in place of the entry when the entry itself could not be built
AuditFailureHandler = Callable[[Optional[AuditEntry], Exception], None]


class AuditLogger:
    """
    Central audit logging service.

    Logs entries both to:
    1. Structured local log (for debugging)
    2. The audit sink (for persistence and the audit timeline)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        on_failure: Optional[AuditFailureHandler] = None,
        retry_attempts: Optional[int] = None,
        retry_wait_seconds: Optional[float] = None,
        retry_max_wait_seconds: Optional[float] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Audit sink. If None, only logs locally.
            on_failure: Called with the entry and the error when the
                       sink write still fails after all retries.
            retry_attempts: Sink write attempts (default from settings)
            retry_wait_seconds: Base backoff wait (default from settings)
            retry_max_wait_seconds: Backoff ceiling (default from settings)
        """
        settings = get_settings().audit

        self._storage = storage
        self._on_failure = on_failure
        self._retry_attempts = retry_attempts or settings.sink_retry_attempts
        self._retry_wait = (
            settings.sink_retry_wait_seconds
            if retry_wait_seconds is None else retry_wait_seconds
        )
        self._retry_max_wait = (
            settings.sink_retry_max_wait_seconds
            if retry_max_wait_seconds is None else retry_max_wait_seconds
        )
        self._logger = structlog.get_logger()

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    async def log(self, entry: AuditEntry) -> Optional[AuditEntry]:
        """
        Log an audit entry.

        Always logs locally. Persists to the sink if one is configured.

        Returns:
            The stored entry (with id), the entry itself when there is
            no sink, or None if the sink write failed.
        """
        self._logger.info("audit_entry", **entry.to_log_dict())

        if self._storage is None:
            return entry

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(
                    multiplier=self._retry_wait,
                    max=self._retry_max_wait,
                ),
                reraise=True,
            ):
                with attempt:
                    stored = await self._storage.log(entry)
        except Exception as e:
            # The write this entry describes has already happened
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                entity_type=entry.entity_type.value,
                entity_id=entry.entity_id,
                action=entry.action.value,
                attempts=self._retry_attempts,
            )
            if self._on_failure is not None:
                self._on_failure(entry, e)
            return None

        return stored

    async def record(
        self,
        build: Callable[[], AuditEntry],
        **context,
    ) -> Optional[AuditEntry]:
        """
        Build an entry and log it.

        Building covers snapshotting and diffing, which run after the
        domain write. A failure there is reported like a sink failure
        instead of reaching the caller.

        Args:
            build: Produces the entry
            context: Extra fields for the failure log line
        """
        try:
            entry = build()
        except Exception as e:
            self._logger.error("audit_entry_build_failed", error=str(e), **context)
            if self._on_failure is not None:
                self._on_failure(None, e)
            return None

        return await self.log(entry)

    async def clear(self) -> None:
        """Remove every entry from the sink."""
        if self._storage is None:
            return
        await self._storage.clear()
        self._logger.warning("audit_log_cleared")
