"""Container state models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ContainerState(Enum):
    """Lifecycle states reported by the container runtime."""
    CONFIGURED = "configured"
    EXITED = "exited"
    STOPPED = "stopped"
    RUNNING = "running"
    UNKNOWN = "unknown"


class ContainerStatus(BaseModel):
    """Observed container state along with the raw runtime string."""

    model_config = ConfigDict(frozen=True)

    state: ContainerState
    raw: str

    @classmethod
    def parse(cls, raw: str) -> 'ContainerStatus':
        """Map a runtime status string onto a known state."""
        value = raw.strip()
        try:
            state = ContainerState(value)
        except ValueError:
            state = ContainerState.UNKNOWN
        return cls(state=state, raw=value)

    @property
    def needs_start(self) -> bool:
        return self.state in (
            ContainerState.CONFIGURED,
            ContainerState.EXITED,
            ContainerState.STOPPED,
        )

    @property
    def is_running(self) -> bool:
        return self.state is ContainerState.RUNNING
