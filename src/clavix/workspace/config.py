"""Schema for the user's .clavix/config.json."""

from typing import Any, List

from pydantic import BaseModel, Field, model_validator


class UserConfig(BaseModel):
    """Per-project configuration stored in the workspace."""
    version: str = Field("0.0.0", description="Clavix version that wrote the file")
    integrations: List[str] = Field(
        default_factory=list,
        description="Enabled integration names"
    )

    model_config = {"extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def migrate_providers(cls, data: Any) -> Any:
        """Fold the legacy ``providers`` list into ``integrations``."""
        if isinstance(data, dict) and "providers" in data:
            data = dict(data)
            legacy = data.pop("providers") or []
            if not data.get("integrations"):
                data["integrations"] = legacy
        return data

    @model_validator(mode="after")
    def check_integrations(self) -> "UserConfig":
        if any(not name.strip() for name in self.integrations):
            raise ValueError("integration names must be non-empty")
        return self
