"""Model runtime settings."""

from pydantic import BaseModel, ConfigDict, Field


class ModelConfig(BaseModel):
    """Notification settings applied to a model instance."""

    model_config = ConfigDict(frozen=True)

    notify_delay: float = Field(
        default=0.0,
        ge=0.0,
        description=(
            "Seconds to wait before flushing a debounced change notification "
            "(0 = next event loop iteration). Only used when the model creates "
            "its own AsyncioScheduler."
        ),
    )
    propagate_listener_errors: bool = Field(
        default=False,
        description="Re-raise listener exceptions instead of logging and isolating them",
    )
