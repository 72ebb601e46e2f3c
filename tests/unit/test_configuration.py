"""Unit tests for configuration models and reconciliation."""

from pathlib import Path

import pytest

from tc39_jira_sync.configuration.env import Settings
from tc39_jira_sync.configuration.exceptions import JiraAuthenticationConfigurationUndefinedError, StageMappingConfigurationError
from tc39_jira_sync.configuration.models import SyncConfig
from tc39_jira_sync.configuration.reconcile import reconcile_sync_configuration, validate_jira_authentication_configuration


def test_default_stage_mapping() -> None:
    """Every tracked stage maps to its parent epic by default."""
    config = SyncConfig()

    assert {stage: config.parent_for_stage(stage) for stage in (1, 2, 2.7, 3, 4)} == {
        1: "SJP-184",
        2: "SJP-185",
        2.7: "SJP-186",
        3: "SJP-187",
        4: "SJP-188",
    }
    assert config.parent_for_stage(3.5) is None


def test_stage_mapping_can_be_substituted() -> None:
    """An alternate mapping is used as given."""
    parents = {"1": "X-1", "2": "X-2", "2.7": "X-27", "3": "X-3", "4": "X-4"}
    config = SyncConfig(project_key="X", stage_parents=parents)

    assert config.parent_for_stage(2.7) == "X-27"


def test_stage_mapping_missing_tracked_stage() -> None:
    """A mapping without a parent for a tracked stage is rejected."""
    with pytest.raises(StageMappingConfigurationError) as exc_info:
        SyncConfig(stage_parents={"1": "SJP-184", "2": "SJP-185", "3": "SJP-187", "4": "SJP-188"})

    assert exc_info.value.missing_stages == ["2.7"]


def test_sync_config_is_immutable() -> None:
    """Neither the configuration nor its stage mapping can be changed after construction."""
    parents = {"1": "A", "2": "B", "2.7": "C", "3": "D", "4": "E"}
    config = SyncConfig(stage_parents=parents)
    parents["4"] = "changed"

    assert config.parent_for_stage(4) == "E"
    with pytest.raises(TypeError):
        config.stage_parents["4"] = "changed"  # type: ignore[index]
    with pytest.raises(AttributeError):
        config.project_key = "OTHER"  # type: ignore[misc]


def test_invalid_page_size_is_rejected() -> None:
    """The search page size must be positive."""
    with pytest.raises(ValueError):
        SyncConfig(search_page_size=0)


def test_jql_and_key_pattern() -> None:
    """The JQL and key pattern are derived from the project settings."""
    config = SyncConfig(project_key="SJP", component="TC39 Proposals")

    assert config.jql == 'project = "SJP" and component = "TC39 Proposals"'
    assert config.key_pattern.search("see SJP-1234 for details").group(0) == "SJP-1234"
    assert config.key_pattern.search("XSJP-12") is None


@pytest.mark.asyncio
async def test_reconcile_sync_configuration_prefers_cli_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """The CLI Jira URL overrides the environment, and other settings come from the environment."""
    monkeypatch.setenv("JIRA_API_URL", "https://env.example.com")
    monkeypatch.setenv("JIRA_PROJECT_KEY", "ABC")
    monkeypatch.setenv("JIRA_STAGE_PARENTS", '{"1": "ABC-1", "2": "ABC-2", "2.7": "ABC-3", "3": "ABC-4", "4": "ABC-5"}')
    monkeypatch.setenv("MIN_STAGE4_EDITION", "2025")
    settings = Settings(_env_file=None)  # type: ignore[call-arg]

    config = await reconcile_sync_configuration(settings, cli_jira_api_url="https://cli.example.com")

    assert config.jira_api_url == "https://cli.example.com"
    assert config.project_key == "ABC"
    assert config.parent_for_stage(2.7) == "ABC-3"
    assert config.min_stage4_edition == 2025


@pytest.mark.asyncio
async def test_valid_token_authentication() -> None:
    """A token given directly is used as is."""
    credentials = await validate_jira_authentication_configuration(
        jira_user_email="someone@example.com",
        jira_api_token="secret-token",
        jira_api_token_path=None,
    )

    assert credentials.user_email == "someone@example.com"
    assert credentials.api_token == "secret-token"


@pytest.mark.asyncio
async def test_token_read_from_file(tmp_path: Path) -> None:
    """Without a token in the environment, it is read from the token file and stripped."""
    token_path = tmp_path / "apitoken"
    token_path.write_text("secret-token\n", encoding="utf-8")

    credentials = await validate_jira_authentication_configuration(
        jira_user_email="someone@example.com",
        jira_api_token=None,
        jira_api_token_path=token_path,
    )

    assert credentials.api_token == "secret-token"


@pytest.mark.asyncio
async def test_missing_user_error() -> None:
    """Test that error is raised when no user email is provided."""
    with pytest.raises(JiraAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_jira_authentication_configuration(jira_user_email=None, jira_api_token="secret-token", jira_api_token_path=None)

    assert "No Jira user configured" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_token_file_error(tmp_path: Path) -> None:
    """Test that error is raised when the token file does not exist."""
    with pytest.raises(JiraAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_jira_authentication_configuration(
            jira_user_email="someone@example.com",
            jira_api_token=None,
            jira_api_token_path=tmp_path / "missing",
        )

    assert "token file not found" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_token_file_error(tmp_path: Path) -> None:
    """Test that error is raised when the token file is empty."""
    token_path = tmp_path / "apitoken"
    token_path.write_text("  \n", encoding="utf-8")

    with pytest.raises(JiraAuthenticationConfigurationUndefinedError) as exc_info:
        await validate_jira_authentication_configuration(
            jira_user_email="someone@example.com",
            jira_api_token=None,
            jira_api_token_path=token_path,
        )

    assert "empty" in str(exc_info.value)


@pytest.mark.parametrize("reference_timezone", ["Mars/Olympus", "", "../etc/passwd"])
def test_unknown_reference_timezone_is_rejected(reference_timezone: str) -> None:
    """A time zone that does not resolve is rejected before any proposal is rendered."""
    with pytest.raises(ValueError) as exc_info:
        SyncConfig(reference_timezone=reference_timezone)

    assert "time zone" in str(exc_info.value)


def test_named_reference_timezone_is_accepted() -> None:
    """IANA zone names other than UTC are accepted."""
    assert SyncConfig(reference_timezone="America/Los_Angeles").reference_timezone == "America/Los_Angeles"
