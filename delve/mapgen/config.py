import os
from dataclasses import dataclass
from typing import Optional

INTERVAL = 5
MINIMUM = 10


class MapGenConfigError(ValueError):
    """Generation was requested with settings the partitioner cannot honour."""


class LayoutInvariantError(RuntimeError):
    """Internal consistency check failed while building a layout."""


@dataclass
class MapGenSettings:
    width: int = 151
    height: int = 151
    render_width: int = 45
    render_height: int = 15
    interval: int = INTERVAL
    minimum: int = MINIMUM
    seed: Optional[int] = None
    step_delay: float = 0.0

    def validate(self) -> "MapGenSettings":
        if self.interval <= 0:
            raise MapGenConfigError(f"interval must be positive, got {self.interval}")
        if self.minimum <= 0:
            raise MapGenConfigError(f"minimum must be positive, got {self.minimum}")
        for name in ("width", "height"):
            value = getattr(self, name)
            extent = value - 1
            if extent <= 0 or extent % self.interval:
                raise MapGenConfigError(
                    f"{name}-1 must be a positive multiple of {self.interval}, got {name}={value}"
                )
        if self.render_width < 0 or self.render_height < 0:
            raise MapGenConfigError("render extents must not be negative")
        if self.seed is not None and not 0 <= self.seed <= 255:
            raise MapGenConfigError(f"seed must be a table index in 0-255, got {self.seed}")
        if self.step_delay < 0:
            raise MapGenConfigError("step_delay must not be negative")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "MapGenSettings":
        env_map = {
            "MAPGEN_WIDTH": ("width", int),
            "MAPGEN_HEIGHT": ("height", int),
            "MAPGEN_RENDER_WIDTH": ("render_width", int),
            "MAPGEN_RENDER_HEIGHT": ("render_height", int),
            "MAPGEN_SEED": ("seed", int),
            "MAPGEN_STEP_DELAY": ("step_delay", float),
        }
        values = {}
        for env_key, (attr, cast) in env_map.items():
            raw = os.environ.get(env_key, "").strip()
            if not raw:
                continue
            try:
                values[attr] = cast(raw)
            except ValueError as exc:
                raise MapGenConfigError(f"{env_key}={raw!r} is not a valid {cast.__name__}") from exc
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


__all__ = ["INTERVAL", "MINIMUM", "MapGenConfigError", "LayoutInvariantError", "MapGenSettings"]
