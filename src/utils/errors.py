"""Error taxonomy for the search bridge."""


class BridgeError(Exception):
    """Base exception for the search bridge."""
    pass


class ConfigurationError(BridgeError):
    """Missing or invalid configuration for an outbound client."""
    pass


class VerificationError(BridgeError):
    """Inbound verification token did not match."""
    pass


class UnknownTeamError(BridgeError):
    """No credential record exists for a team."""

    def __init__(self, team_id: str):
        super().__init__(f"No credential record for team: {team_id}")
        self.team_id = team_id


class UpstreamError(BridgeError):
    """A Slack or Algolia call failed."""

    def __init__(self, service: str, operation: str, detail: str):
        super().__init__(f"{service} {operation} failed: {detail}")
        self.service = service
        self.operation = operation
