"""Layer Merge — resolves a device's desired configuration from ordered layers.

Invariants:
    - Later layers win: every set value in a layer overwrites what earlier layers set
    - Unset (None) values never overwrite; empty lists are skipped
    - Sections recurse; lists merge element-wise by index (paths "relay.0.name")
    - sources maps every leaf path written to the name of the layer that set it last
    - Paths use the stored key names, so ap/mqtt/auth secrets appear as "*.pass"
    - Pure: input layers are never mutated
"""

from dataclasses import dataclass, field
from typing import Any

from fleetconfig.core.device_configuration import DeviceConfiguration

DEVICE_OVERRIDE_LAYER = "device-override"


@dataclass(frozen=True)
class ConfigLayer:
    """A named configuration contributing to a device's desired state."""
    name: str
    config: DeviceConfiguration | None


@dataclass
class MergeResult:
    config: DeviceConfiguration
    sources: dict[str, str] = field(default_factory=dict)


def _join(prefix: str, key: Any) -> str:
    return f"{prefix}.{key}" if prefix else str(key)


def _merge_value(
    current: Any, incoming: Any, sources: dict[str, str], layer: str, path: str,
) -> Any:
    if incoming is None:
        return current
    if isinstance(incoming, dict):
        base = dict(current) if isinstance(current, dict) else {}
        for key, value in incoming.items():
            merged = _merge_value(
                base.get(key), value, sources, layer, _join(path, key),
            )
            if merged is not None:
                base[key] = merged
        return base
    if isinstance(incoming, list):
        if not incoming:
            return current
        base = list(current) if isinstance(current, list) else []
        base.extend([None] * (len(incoming) - len(base)))
        for index, value in enumerate(incoming):
            base[index] = _merge_value(
                base[index], value, sources, layer, _join(path, index),
            )
        return base
    sources[path] = layer
    return incoming


def merge_layers(layers: list[ConfigLayer]) -> MergeResult:
    """Overlay `layers` in order onto an empty configuration."""
    merged: dict = {}
    sources: dict[str, str] = {}
    for layer in layers:
        if layer.config is None:
            continue
        document = layer.config.model_dump(exclude_none=True, by_alias=True)
        merged = _merge_value(merged, document, sources, layer.name, "")
    return MergeResult(
        config=DeviceConfiguration.model_validate(merged), sources=sources,
    )
