"""Data models for the normalization layer."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class LibraryShape(str, Enum):
    """Structural shape of a promise library, in synthesis order."""

    NESTED = "nested"
    CONSTRUCTOR = "constructor"
    DEFERRED_FACTORY = "deferred_factory"
    NONE = "none"


class CapabilityProfile(BaseModel):
    """Result of probing a candidate constructor."""

    is_constructor: bool = False
    is_fully_conformant: bool = False
    statics: list[str] = Field(default_factory=list)


class LibraryDescriptor(BaseModel):
    """A library value paired with its probed shape."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    library: Any
    shape: LibraryShape
    constructor: Any = Field(
        default=None,
        description="The constructor found for NESTED/CONSTRUCTOR shapes.",
    )


class NormalizationOptions(BaseModel):
    """Per-call options for :func:`~unifuture.normalize`."""

    model_config = ConfigDict(populate_by_name=True)

    override: bool = Field(
        default=False,
        description="Install the synthesized constructor even over a native one.",
    )
    fallback: bool = Field(
        default=True,
        description="Prefer the native constructor when one is available.",
    )
    global_: bool = Field(
        default=True,
        alias="global",
        description="Install the result as the ambient constructor when allowed.",
    )
    debug: bool = Field(
        default=False,
        description="Report adaptation gaps at WARNING instead of DEBUG.",
    )
    extensions: dict[str, bool] = Field(
        default_factory=dict,
        description="Optional non-standard members to attach, by name.",
    )

    def merged_over(self, defaults: NormalizationOptions) -> NormalizationOptions:
        """Return *defaults* with every field explicitly set here applied on top."""
        update = self.model_dump(exclude_unset=True)
        if "extensions" in update:
            update["extensions"] = {**defaults.extensions, **self.extensions}
        return defaults.model_copy(update=update)


class SettledResult(BaseModel):
    """Outcome record produced by the ``settle`` extension."""

    status: Literal["fulfilled", "rejected"]
    fulfilled: bool
    rejected: bool
    value: Any = None
    reason: Any = None

    @classmethod
    def from_value(cls, value: Any) -> SettledResult:
        return cls(status="fulfilled", fulfilled=True, rejected=False, value=value)

    @classmethod
    def from_reason(cls, reason: Any) -> SettledResult:
        return cls(status="rejected", fulfilled=False, rejected=True, reason=reason)
