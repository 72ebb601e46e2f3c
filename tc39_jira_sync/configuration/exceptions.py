"""Contains exceptions raised when reconciling application configuration."""


class JiraAuthenticationConfigurationUndefinedError(Exception):
    """Raised when the Jira authentication configuration is undefined."""

    pass


class StageMappingConfigurationError(Exception):
    """Raised when a tracked stage has no parent epic configured."""

    def __init__(self, missing_stages: list[str]) -> None:
        """Initializes the exception with the stages lacking a parent epic."""
        super().__init__(f"No parent epic configured for stage(s): {', '.join(missing_stages)}")
        self.missing_stages = missing_stages
