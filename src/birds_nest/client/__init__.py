"""Client for the BIRDS NEST remote LCIA calculation service."""

from birds_nest.client.lcia import ClientConfig, LciaClient
from birds_nest.client.outcomes import Outcome, OutcomeKind
from birds_nest.client.session import SessionState

__all__ = ["ClientConfig", "LciaClient", "Outcome", "OutcomeKind", "SessionState"]
