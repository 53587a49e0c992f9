from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Architecture(str, Enum):
    amd64 = "amd64"
    arm64 = "arm64"
    i386 = "386"


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class FieldSpec(FrozenModel):
    name: str = ""
    type_name: str = Field(alias="type")


class PaddingEntry(FrozenModel):
    kind: Literal["padding"] = "padding"
    offset: int = Field(ge=0)
    size: int = Field(gt=0)


class FieldEntry(FrozenModel):
    kind: Literal["field"] = "field"
    name: str
    type_name: str
    offset: int = Field(ge=0)
    size: int = Field(ge=0)
    alignment: int = Field(gt=0)


LayoutEntry = Annotated[Union[PaddingEntry, FieldEntry], Field(discriminator="kind")]


class Layout(FrozenModel):
    entries: Tuple[LayoutEntry, ...] = ()
    total_size: int = 0
    data_bytes: int = 0
    padding_bytes: int = 0
    max_alignment: int = 1

    @property
    def fields(self) -> List[FieldEntry]:
        return [e for e in self.entries if isinstance(e, FieldEntry)]

    @property
    def field_names(self) -> List[str]:
        return [e.name for e in self.fields]

    def padding_after(self, index: int) -> int:
        """Length of the padding entry directly after ``entries[index]``, else 0."""
        nxt = index + 1
        if nxt < len(self.entries) and isinstance(self.entries[nxt], PaddingEntry):
            return self.entries[nxt].size
        return 0


class OptimizationResult(FrozenModel):
    original: Layout
    optimized: Layout
    bytes_saved: int = Field(ge=0)
    reordered_fields: List[str]

    @property
    def already_optimal(self) -> bool:
        return self.bytes_saved == 0


class CacheLineInfo(FrozenModel):
    line_number: int
    start_offset: int
    end_offset: int
    field_names: List[str]
    bytes_used: int
    bytes_padding: int


class FieldCacheInfo(FrozenModel):
    name: str
    start_line: int
    end_line: int
    crosses_line_boundary: bool


class CacheLineReport(FrozenModel):
    line_size: int
    lines: List[CacheLineInfo]
    fields: List[FieldCacheInfo]
    hot_fields: List[str]
    lines_spanned: int


class StructDefinition(FrozenModel):
    name: str
    fields: List[FieldSpec] = Field(default_factory=list)


class FieldInfo(FrozenModel):
    name: str
    type_name: str
    offset: int
    size: int
    alignment: int
    padding_after: int
    cache_line_start: int
    cache_line_end: int
    crosses_cache_line: bool


class StructAnalysis(FrozenModel):
    name: str
    architecture: Architecture
    layout: Layout
    optimization: OptimizationResult
    cache_lines: CacheLineReport
    fields: List[FieldInfo]
    cache_lines_crossed: int
    hot_fields: List[str]


class Finding(BaseModel):
    rank: int
    symptom: str
    likely_root_cause: str
    check: str
    remediation: str
    evidence: Dict[str, Any] = Field(default_factory=dict)


class StructReport(BaseModel):
    analysis: StructAnalysis
    findings: List[Finding] = Field(default_factory=list)


class MemoryReport(BaseModel):
    architecture: Architecture
    generated_at: str
    line_size: int
    strict_types: bool = False
    source: Optional[str] = None
    notes: List[str] = Field(default_factory=list)
    structs: List[StructReport] = Field(default_factory=list)


# Export interchange shape. Field names on the wire are camelCase and must
# stay stable.


class ExportField(FrozenModel):
    name: str
    type_name: str = Field(alias="type")
    offset: int
    size: int
    alignment: int
    padding_after: int = Field(alias="paddingAfter")


class ExportStruct(FrozenModel):
    name: str
    total_size: int = Field(alias="totalSize")
    alignment: int
    total_padding: int = Field(alias="totalPadding")
    padding_percentage: int = Field(alias="paddingPercentage")
    fields: List[ExportField]


class ExportFormat(FrozenModel):
    structs: List[ExportStruct]
    architecture: Architecture
    exported_at: str = Field(alias="exportedAt")
