import os
from math import isfinite
from typing import Annotated, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 30  # position frames between debug samples


# ----------------- ENGINE ---------------------


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    reach_threshold_m: float = 1.0
    deviation_threshold_m: float = 1.5
    recalc_cooldown_ms: float = 2000.0
    lookahead: int = 2  # waypoints beyond the next one considered for progress/deviation

    @field_validator("reach_threshold_m", "deviation_threshold_m")
    def _positive(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v <= 0:
            raise ValueError(f"{info.field_name} must be a positive finite number")
        return v

    @field_validator("recalc_cooldown_ms")
    def _nonneg_ms(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError(f"{info.field_name} must be a finite number >= 0")
        return v

    @field_validator("lookahead")
    def _nonneg_int(cls, v: int, info: ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


# ----------------- CLOCKS ---------------------


class ClockMonotonicModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["monotonic"] = "monotonic"


class ClockManualModel(BaseModel):
    """Deterministic time for previews and tests."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["manual"] = "manual"
    start_ms: float = 0.0


ClockUnion = Annotated[ClockMonotonicModel | ClockManualModel, Field(discriminator="kind")]


# ----------------- RECORDER ---------------------


class RecorderModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sinks: list[Literal["jsonl", "memory"]] = Field(default_factory=list)


# ------------------ GRAPH RECORDS ------------------------


class NodeRecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    id: str
    x: float
    z: float
    walkable: bool = True
    label: str | None = None
    category: Literal["normal", "entrance", "destination", "anchor"] = Field(
        default="normal", validation_alias=AliasChoices("category", "type")
    )
    floor_id: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _legacy_category(cls, v):
        # older exports tag section nodes as "section", anchor markers as "qr_anchor"
        if v is None:
            return "normal"
        return {"section": "destination", "qr_anchor": "anchor"}.get(v, v)

    @field_validator("x", "z")
    @classmethod
    def _finite(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v):
            raise ValueError(f"node coordinate {info.field_name} must be finite")
        return v


class EdgeRecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    id: str | None = None
    from_node: str = Field(validation_alias=AliasChoices("from_node", "fromNodeId"))
    to_node: str = Field(validation_alias=AliasChoices("to_node", "toNodeId"))
    distance: float | None = None  # None => computed from node coordinates
    floor_id: str | None = None

    @field_validator("distance")
    @classmethod
    def _nonneg(cls, v: float | None) -> float | None:
        if v is None:
            return None
        if not isfinite(v) or v < 0:
            raise ValueError("edge distance must be a finite value >= 0")
        return v


class SectionRecordModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    id: str
    name: str
    node_id: str = Field(validation_alias=AliasChoices("node_id", "nodeId"))
    icon: str | None = None
    floor_id: str | None = None


class GraphDataModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    nodes: list[NodeRecordModel] = Field(default_factory=list)
    edges: list[EdgeRecordModel] = Field(default_factory=list)
    sections: list[SectionRecordModel] = Field(default_factory=list)
    bidirectional: bool = False  # mirror every edge record

    @model_validator(mode="after")
    def _unique_sections(self):
        seen: set[str] = set()
        for s in self.sections:
            if s.id in seen:
                raise ValueError(f"duplicate section id {s.id!r}")
            seen.add(s.id)
        return self


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["json", "pickle"] = "json"

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class GraphInline(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["inline"] = "inline"
    data: GraphDataModel


class GraphDemo(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["demo"] = "demo"


GraphRef = Annotated[GraphByPath | GraphInline | GraphDemo, Field(discriminator="by")]


# ------------------------------------------------------------------


class SessionModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "session"
    session_id: str = "local"
    destination: str  # section id
    start_node: str | None = None  # None => graph's default entry node
    graph: GraphRef = Field(default_factory=GraphDemo)
    log: LogModel = LogModel()
    engine: EngineModel = EngineModel()
    clock: ClockUnion = Field(default_factory=ClockMonotonicModel)
    recorder: RecorderModel = RecorderModel()
