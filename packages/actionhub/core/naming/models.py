"""Naming models for action canonicalization.

Manifest documents are authored by hand in JSON or YAML, so mapping and
default fields accept the short document keys ``dir`` and ``type`` as
aliases for ``direction`` and ``timing``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ViewId(str, Enum):
    """Camera view an animation is rendered from."""

    SIDE = "VIEW_SIDE"
    TOP = "VIEW_TOP"
    ISO45 = "VIEW_ISO45"


class DirectionSet(str, Enum):
    """Set of facing directions an action is authored for."""

    LR = "LR"
    FOUR = "4dir"
    EIGHT = "8dir"
    NONE = "none"


class TimingType(str, Enum):
    """Whether an action loops or plays once."""

    LOOP = "loop"
    ONCE = "once"


class Delivery(str, Enum):
    """Deliverable kind for one export task."""

    SPRITE = "sprite"
    PREVIEW = "preview"


class NamingMapping(BaseModel):
    """Manifest override for a single animation.

    Every field is optional; present fields win over anything inferred
    from the animation name.
    """

    name: str | None = Field(default=None, description="Explicit canonical name")
    category: str | None = None
    direction: DirectionSet | None = Field(default=None, alias="dir")
    timing: TimingType | None = Field(default=None, alias="type")
    action: str | None = None
    variant: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class ManifestDefaults(BaseModel):
    """Manifest-wide defaults, applied before the export config defaults."""

    view: ViewId | None = None
    category: str | None = None
    direction: DirectionSet | None = Field(default=None, alias="dir")
    timing: TimingType | None = Field(default=None, alias="type")

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class NamingManifest(BaseModel):
    """Authoritative, asset-scoped naming override table.

    Keys of ``mappings`` are ``"<assetKey>::<animation>"``, the legacy
    ``"<assetKey>/<animation>"``, or a bare animation name.
    """

    version: str = Field(default="1.0", description="Manifest format version")
    generated_date: str | None = None
    defaults: ManifestDefaults | None = None
    mappings: dict[str, NamingMapping] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")


class NamingConfig(BaseModel):
    """Naming settings embedded in an export configuration."""

    enabled: bool = Field(default=False, description="Use canonical archive layout")
    view: ViewId = Field(default=ViewId.SIDE, description="Default camera view")
    default_category: str = Field(default="locomotion", min_length=1)
    default_direction: DirectionSet = Field(default=DirectionSet.LR)
    default_timing: TimingType = Field(default=TimingType.LOOP)
    manifest: NamingManifest | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class ActionSpec(BaseModel):
    """Resolved identity of one animation."""

    canonical_name: str = Field(description="category/action_variant")
    category: str
    action: str
    variant: str
    direction: DirectionSet
    timing: TimingType
    view: ViewId

    model_config = ConfigDict(frozen=True, extra="forbid")


class DerivedPaths(BaseModel):
    """Archive locations derived from an ActionSpec.

    Sprite deliveries carry ``output_base_path`` (callers append frame
    numbering or atlas suffixes); preview deliveries carry a complete
    ``output_file_path``.
    """

    delivery: Delivery
    view: ViewId
    category: str
    canonical_name: str
    base_name: str = Field(description="action_variant_dir_type_<fps>fps_<frames>f")
    output_file_path: str | None = None
    output_base_path: str | None = None
    metadata_path: str

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def output_path(self) -> str:
        """Whichever output location this delivery uses."""
        return self.output_file_path or self.output_base_path or ""
