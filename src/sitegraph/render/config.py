"""
Runtime configuration of the graph view.

Every recognized option is enumerated with its default and validated once
when the view is initialized. Unknown keys and out-of-range values fail
fast with ``ConfigError``. Keys use the camelCase names of the JSON
dataset (``repelForce``); snake_case names are accepted as well.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..core.errors import ConfigError
from ..layout.simulation import LayoutParams


class RenderConfig(BaseModel):
    """Options consumed by the render layer at initialization."""

    depth: int = 1
    scale: float = Field(default=1.1, gt=0)
    drag: bool = True
    zoom: bool = True
    repel_force: float = Field(default=0.5, ge=0)
    center_force: float = Field(default=0.3, ge=0)
    link_distance: float = Field(default=30.0, ge=0)
    font_size: float = Field(default=0.6, ge=0)
    opacity_scale: float = Field(default=1.0, ge=0)
    remove_tags: List[str] = Field(default_factory=list)
    show_tags: bool = True
    focus_on_hover: bool = False

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def from_mapping(cls, data: Dict[str, Any] | None) -> "RenderConfig":
        try:
            return cls.model_validate(data or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid graph configuration: {e}") from e

    @classmethod
    def from_json(cls, text: str) -> "RenderConfig":
        """Parse the JSON configuration attached to a graph container."""
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise ConfigError(f"Graph configuration is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Graph configuration must be a JSON object")
        return cls.from_mapping(data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RenderConfig":
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read graph configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Graph configuration {path} must be a mapping")
        return cls.from_mapping(data)

    @classmethod
    def coerce(cls, value: "RenderConfig | Dict[str, Any] | str | None") -> "RenderConfig":
        if isinstance(value, RenderConfig):
            return value
        if isinstance(value, str):
            return cls.from_json(value)
        return cls.from_mapping(value)

    def to_dataset(self) -> Dict[str, Any]:
        """The camelCase mapping embedded into rendered pages."""
        return self.model_dump(by_alias=True)

    def layout_params(self) -> LayoutParams:
        return LayoutParams(
            repel_force=self.repel_force,
            center_force=self.center_force,
            link_distance=self.link_distance,
        )
