"""Engine configuration.

EngineConfig is a Pydantic model holding the key-naming conventions and
limits shared by the reconstructor and the value mapper.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Configuration for reconstruction and value mapping."""

    max_depth: int = Field(default=32, ge=1)
    type_key: str = "__type"
    shadow_prefix: str = "_"
    element_wise_suffix: str = "[]"
    filter_prefix: str = "filter:"
    method_separator: str = "::"
    decode_serialized: bool = True
    allow_imports: bool = True
    options_prefix: str = "options_"


DEFAULT_CONFIG = EngineConfig()
