"""Storage — wires every repository to one injected relational store.

Invariants:
    - One Storage = one SqlRelationalStore = one DatabaseSessionManager
    - Repositories share the store; none opens its own engine
    - open_storage configures logging before the first query is issued

Design Decisions:
    - Explicit object passed to callers instead of a process-wide
      "current database" global; tests build a Storage per in-memory engine
"""

import logging

from contractdesk.config import Settings, get_settings
from contractdesk.infrastructure.database import DatabaseSessionManager
from contractdesk.infrastructure.observability import setup_logging
from contractdesk.infrastructure.relational_store import SqlRelationalStore
from contractdesk.repositories.contracts import ContractRepository
from contractdesk.repositories.contributors import ContributorRepository
from contractdesk.repositories.payment_methods import PaymentMethodRepository
from contractdesk.repositories.projects import ProjectRepository
from contractdesk.repositories.resignations import ResignationRepository
from contractdesk.repositories.tasks import TaskRepository
from contractdesk.repositories.wallets import WalletRepository

logger = logging.getLogger(__name__)


class Storage:
    """Entry point to the data layer: one attribute per repository."""

    def __init__(
        self,
        manager: DatabaseSessionManager,
        page_size: int = 100,
        default_estimation_minutes: int = 60,
    ):
        self.manager = manager
        self.store = SqlRelationalStore(manager)
        self.projects = ProjectRepository(self.store, page_size)
        self.contributors = ContributorRepository(self.store)
        self.contracts = ContractRepository(self.store, page_size)
        self.tasks = TaskRepository(
            self.store, page_size, default_estimation_minutes,
        )
        self.resignations = ResignationRepository(self.store)
        self.wallets = WalletRepository(self.store)
        self.payment_methods = PaymentMethodRepository(self.store)

    def health_check(self) -> bool:
        return self.manager.health_check()

    def close(self) -> None:
        self.manager.dispose()


def open_storage(settings: Settings | None = None) -> Storage:
    """Build a Storage (and its connection pool) from settings."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    logger.info(
        f"Storage opened on {manager.engine.url.render_as_string(hide_password=True)}",
    )
    return Storage(
        manager,
        page_size=settings.page_size,
        default_estimation_minutes=settings.default_estimation_minutes,
    )
