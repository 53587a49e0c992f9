from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from .models import FieldEntry, Finding, MemoryReport, StructReport
from .utils import percent


def _format_findings(findings: List[Finding]) -> List[str]:
    lines = []
    for finding in findings:
        lines.append(f"{finding.rank}. **{finding.symptom}**")
        lines.append(f"   Likely root cause: {finding.likely_root_cause}")
        lines.append(f"   What to check: {finding.check}")
        lines.append(f"   Remediation: {finding.remediation}")
        if finding.evidence:
            lines.append(f"   Evidence: {finding.evidence}")
        lines.append("")
    return lines


def _format_layout(struct: StructReport) -> List[str]:
    layout = struct.analysis.layout
    lines = [
        "| Offset | Size | Field | Type |",
        "|-------:|-----:|-------|------|",
    ]
    for entry in layout.entries:
        if isinstance(entry, FieldEntry):
            lines.append(f"| {entry.offset} | {entry.size} | `{entry.name}` | `{entry.type_name}` |")
        else:
            lines.append(f"| {entry.offset} | {entry.size} | _padding_ | |")
    return lines


def _format_cache_lines(struct: StructReport) -> List[str]:
    report = struct.analysis.cache_lines
    lines = [
        "| Line | Bytes | Used | Padding | Fields |",
        "|-----:|-------|-----:|--------:|--------|",
    ]
    for info in report.lines:
        names = ", ".join(f"`{n}`" for n in info.field_names) or "-"
        lines.append(
            f"| {info.line_number} | {info.start_offset}-{info.end_offset} "
            f"| {info.bytes_used} | {info.bytes_padding} | {names} |"
        )
    return lines


def _format_struct(struct: StructReport) -> List[str]:
    analysis = struct.analysis
    layout = analysis.layout
    optimization = analysis.optimization

    lines = [
        f"## {analysis.name}",
        "",
        f"- Size: {layout.total_size} bytes",
        f"- Data: {layout.data_bytes} bytes",
        f"- Padding: {layout.padding_bytes} bytes ({percent(layout.padding_bytes, layout.total_size)}%)",
        f"- Alignment: {layout.max_alignment}",
        "",
        "### Layout",
    ]
    lines.extend(_format_layout(struct))

    lines.extend(["", "### Optimization"])
    if optimization.already_optimal:
        lines.append(f"- Already optimal at {layout.total_size} bytes")
    else:
        lines.append(
            f"- Optimized size: {optimization.optimized.total_size} bytes "
            f"(-{optimization.bytes_saved})"
        )
        lines.append(f"- Suggested order: {', '.join(optimization.reordered_fields)}")

    lines.extend(["", f"### Cache lines ({analysis.cache_lines.line_size} bytes)"])
    lines.extend(_format_cache_lines(struct))
    if analysis.hot_fields:
        lines.append("")
        lines.append(f"Fields crossing a line boundary: {', '.join(analysis.hot_fields)}")

    lines.extend(["", "### Findings"])
    if struct.findings:
        lines.extend(_format_findings(struct.findings))
    else:
        lines.append("- None")
        lines.append("")
    return lines


def render_markdown(report: MemoryReport) -> str:
    lines = [
        "# Struct Memory Layout Report",
        "",
        f"Architecture: `{report.architecture.value}`",
        f"Cache line size: `{report.line_size}`",
        f"Generated: `{report.generated_at}`",
    ]
    if report.source:
        lines.append(f"Source: `{report.source}`")
    lines.extend(["", "## Notes"])
    if report.notes:
        lines.extend([f"- {note}" for note in report.notes])
    else:
        lines.append("- None")
    lines.append("")

    for struct in report.structs:
        lines.extend(_format_struct(struct))

    return "\n".join(lines)


def write_report(report: MemoryReport, out_dir: Path) -> Dict[str, str]:
    out_dir.mkdir(parents=True, exist_ok=True)
    md_path = out_dir / "report.md"
    md_path.write_text(render_markdown(report), encoding="utf-8")
    return {"markdown": str(md_path)}
