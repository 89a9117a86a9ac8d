"""
Audit Logger

DESIGN DECISION: Every change to accounts and connections is logged.
This provides:
1. Traceability of who linked what to whom
2. A record of blocked deletions
3. Debugging capability

The audit logger:
- Always writes a structured local log line
- Persists to audit storage when one is configured
- Never fails the caller's operation because audit storage failed
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from household_books.config import get_settings
from household_books.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from household_books.services.storage import AuditStorageInterface, StorageError


LOGGER_NAME = "household_books.audit"

# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence and user visibility)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        settings = get_settings().audit
        self._enabled = settings.enabled
        self._storage = storage
        logging.getLogger(LOGGER_NAME).setLevel(settings.log_level)
        self._logger = structlog.get_logger(LOGGER_NAME)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        if not self._enabled:
            return True

        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_account_created(
        self,
        account_id: UUID,
        user_id: UUID,
        name: str,
        kind: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.account_created(
            account_id=account_id,
            user_id=user_id,
            name=name,
            kind=kind,
            correlation_id=correlation_id,
        ))

    async def log_account_updated(
        self,
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.account_updated(
            account_id=account_id,
            name=name,
            correlation_id=correlation_id,
        ))

    async def log_account_deleted(
        self,
        account_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.account_deleted(
            account_id=account_id,
            name=name,
            correlation_id=correlation_id,
        ))

    async def log_account_delete_blocked(
        self,
        account_id: UUID,
        name: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.account_delete_blocked(
            account_id=account_id,
            name=name,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_default_accounts_created(
        self,
        user_id: UUID,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.default_accounts_created(
            user_id=user_id,
            counts=counts,
            correlation_id=correlation_id,
        ))

    async def log_partner_account_set(
        self,
        account_id: UUID,
        partner_account_id: Optional[UUID],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.partner_account_set(
            account_id=account_id,
            partner_account_id=partner_account_id,
            correlation_id=correlation_id,
        ))

    async def log_connection_created(
        self,
        account_id: UUID,
        target_account_id: UUID,
        reverse_added: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.connection_created(
            account_id=account_id,
            target_account_id=target_account_id,
            reverse_added=reverse_added,
            correlation_id=correlation_id,
        ))

    async def log_connection_rejected(
        self,
        account_id: UUID,
        error_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.connection_rejected(
            account_id=account_id,
            error_type=error_type,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_connection_cleared(
        self,
        account_id: UUID,
        target_account_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.connection_cleared(
            account_id=account_id,
            target_account_id=target_account_id,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        entity_id: Optional[UUID],
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.validation_failed(
            entity_id=entity_id,
            issues=issues,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., connecting accounts).
    Pass it through all subsequent operations.
    """
    return uuid4()
