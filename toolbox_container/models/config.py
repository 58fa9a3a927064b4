"""Configuration models for the toolbox launcher."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ToolboxConfig(BaseModel):
    """Resolved configuration for one toolbox invocation."""

    model_config = ConfigDict(frozen=True)

    registry: str
    image: str
    name: str
    shell: str
    privileged: bool = False
    runtime_url: Optional[str] = None

    @property
    def image_ref(self) -> str:
        """Fully qualified image reference."""
        return f"{self.registry}/{self.image}"
