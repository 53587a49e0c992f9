from __future__ import annotations

from typing import List

from .models import Finding, StructAnalysis
from .utils import percent

HIGH_PADDING_PERCENT = 25


def build_recommendations(analysis: StructAnalysis) -> List[Finding]:
    findings: List[Finding] = []
    layout = analysis.layout
    optimization = analysis.optimization

    rank = 1

    if optimization.bytes_saved > 0:
        findings.append(
            Finding(
                rank=rank,
                symptom=f"Field order wastes {optimization.bytes_saved} bytes",
                likely_root_cause="Small fields placed between larger, more strictly aligned ones",
                check="Compare the current and optimized layouts",
                remediation="Reorder fields by descending alignment, then size: "
                + ", ".join(optimization.reordered_fields),
                evidence={
                    "current_size": layout.total_size,
                    "optimized_size": optimization.optimized.total_size,
                    "bytes_saved": optimization.bytes_saved,
                    "percent_saved": percent(optimization.bytes_saved, layout.total_size),
                },
            )
        )
        rank += 1

    padding_share = percent(layout.padding_bytes, layout.total_size)
    if padding_share >= HIGH_PADDING_PERCENT:
        findings.append(
            Finding(
                rank=rank,
                symptom=f"{padding_share}% of the struct is padding",
                likely_root_cause="Alignment gaps that reordering cannot fully close",
                check="padding_bytes / total_size",
                remediation="Group small fields together, or narrow wide fields where the value"
                " range allows it.",
                evidence={"padding_bytes": layout.padding_bytes, "total_size": layout.total_size},
            )
        )
        rank += 1

    if analysis.hot_fields:
        findings.append(
            Finding(
                rank=rank,
                symptom="Fields straddle a cache-line boundary",
                likely_root_cause="Field offsets that place a value across two cache lines",
                check=f"Cache lines of {analysis.cache_lines.line_size} bytes",
                remediation="Move frequently accessed fields so they start within one line,"
                " or pad the struct so they begin on a line boundary.",
                evidence={"hot_fields": list(analysis.hot_fields)},
            )
        )
        rank += 1

    if analysis.cache_lines_crossed > 1:
        findings.append(
            Finding(
                rank=rank,
                symptom=f"Struct spans {analysis.cache_lines_crossed} cache lines",
                likely_root_cause="Struct larger than one cache line",
                check="total_size / cache line size",
                remediation="Place the fields used together on hot paths in the first line;"
                " consider splitting rarely used fields into a separate struct.",
                evidence={
                    "total_size": layout.total_size,
                    "line_size": analysis.cache_lines.line_size,
                },
            )
        )
        rank += 1

    return findings
