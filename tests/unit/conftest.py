"""Fixtures for unit tests."""

from typing import Any, Callable, Generator

import pytest
import structlog

from tc39_jira_sync.configuration.models import SyncConfig
from tc39_jira_sync.schemas.proposal import ProposalModel


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def sync_config() -> SyncConfig:
    """Synchronization configuration with the default project layout and a fake Jira URL."""
    return SyncConfig(jira_api_url="https://jira.example.com")


@pytest.fixture
def make_proposal() -> Callable[..., ProposalModel]:
    """Factory for proposals with sensible defaults for the fields a test does not care about."""

    def _make_proposal(**overrides: Any) -> ProposalModel:
        fields: dict[str, Any] = {
            "id": "proposal-foo",
            "name": "Foo",
            "url": "https://github.com/tc39/proposal-foo",
            "stage": 2,
            "notes": [{"date": "2024-02-06", "url": "https://github.com/tc39/notes/blob/main/meetings/2024-02/feb-6.md"}],
        }
        fields.update(overrides)
        return ProposalModel.model_validate(fields)

    return _make_proposal
