from __future__ import annotations

"""
MKBS report generator
---------------------
This module generates a DOCX report for the last batch search of a session.

Design goals:
- Keep MKBS usable even if report dependencies are missing (lazy imports).
- Show where in the data the keys landed, how many were hits / misses, and
  (if `bench` was run) how the engine compares with naive per-key search.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple
import os
import tempfile

from .session import SearchSession


# -----------------------------
# Configuration
# -----------------------------

@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "MKBS Search Report"
    subtitle: str = "Multi-key binary search over a sorted column"

    # How many rows to show in preview tables
    max_rows_preview: int = 15

    # Histogram bins for the position chart
    position_bins: int = 30


def _label(path: Optional[str]) -> str:
    return os.path.basename(path) if path else "(entered in CLI)"


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    session: SearchSession,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX report + charts for the last search of `session`.

    The data and key files are only read, never modified.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e

    rows = session.results()
    if not rows:
        raise ValueError("No outcomes to report on (key list is empty).")
    summary = session.summary()
    n = len(session.data)

    # -----------------------------
    # 1) Charts
    # -----------------------------
    tmpdir = tempfile.mkdtemp(prefix="mkbs_report_")
    # Each chart is: (title, file_path, what_it_shows)
    chart_paths: List[Tuple[str, str, str]] = []

    def _save(filename: str) -> str:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close()
        return path

    def _bar(title: str, labels: List[str], values: List[float], ylabel: str, why: str, filename: str) -> None:
        plt.figure()
        plt.bar(labels, values, edgecolor="black", linewidth=0.8)
        plt.title(title)
        plt.ylabel(ylabel)
        chart_paths.append((title, _save(filename), why))

    _bar(
        "Outcomes of the batch search",
        ["Found", "Missing (hint)", "Missing (unresolved)"],
        [summary["found"], summary["missing_with_hint"], summary["unresolved"]],
        "Keys",
        "Fast mode leaves some misses without an insertion hint; exhaustive mode never does.",
        "outcomes.png",
    )

    positions = [o.position for _, _, o in rows if o.position is not None]
    if positions:
        x = np.array(positions, dtype=float)
        plt.figure()
        counts, bins, patches = plt.hist(
            x,
            bins=min(config.position_bins, max(1, len(set(positions)))),
            range=(0, max(n, 1)),
            edgecolor="black",
            linewidth=0.8,
        )
        for i, p in enumerate(patches):
            p.set_facecolor("C0" if i % 2 == 0 else "C1")
        plt.title("Where the keys landed in the data")
        plt.xlabel("Data index (match or insertion point)")
        plt.ylabel("Keys")
        chart_paths.append((
            "Where the keys landed in the data",
            _save("positions.png"),
            "Dense clusters mean many keys shared a small data window during the recursion.",
        ))

    bench = session.last_bench
    if bench:
        names = ["naive", "fast", "exhaustive"]
        _bar(
            "Comparator calls per batch",
            names,
            [bench[f"{k}_cmps"] for k in names],
            "Comparisons",
            "Comparator calls are the machine-independent cost of each strategy.",
            "bench_cmps.png",
        )

    # -----------------------------
    # 2) Build DOCX report
    # -----------------------------
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Data file", _label(session.data_path))
    _kv("Key file", _label(session.keys_path))
    _kv("Data values", str(n))
    _kv("Keys", str(summary["keys"]))
    _kv("Mode", session.state.last_mode or "unknown")

    doc.add_paragraph("")
    doc.add_heading("Summary", level=1)
    t = doc.add_table(rows=1, cols=2)
    t.rows[0].cells[0].text = "Outcome"
    t.rows[0].cells[1].text = "Keys"
    for label, k in [
        ("Found", "found"),
        ("Missing, insertion hint known", "missing_with_hint"),
        ("Missing, hint unresolved", "unresolved"),
    ]:
        row = t.add_row().cells
        row[0].text = label
        row[1].text = str(summary[k])

    if session.command_log:
        doc.add_paragraph("")
        doc.add_heading("Command log (reproducibility)", level=1)
        doc.add_paragraph("These MKBS commands produced this result:")
        for line in session.command_log:
            doc.add_paragraph(line, style="List Bullet")

    doc.add_paragraph("")
    doc.add_heading("Visualizations", level=1)
    for title, path, why in chart_paths:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.0))
        doc.add_paragraph(why)
        doc.add_paragraph("")

    if bench:
        doc.add_heading("Benchmark", level=1)
        t2 = doc.add_table(rows=1, cols=3)
        h = t2.rows[0].cells
        h[0].text = "Strategy"
        h[1].text = "Comparator calls"
        h[2].text = "Time per batch (ms)"
        for name in ("naive", "fast", "exhaustive"):
            r = t2.add_row().cells
            r[0].text = name
            r[1].text = f"{int(bench[f'{name}_cmps']):,}"
            r[2].text = f"{bench[f'{name}_ms']:.3f}"

    doc.add_paragraph("")
    doc.add_heading("Preview of first few outcomes", level=1)
    t3 = doc.add_table(rows=1, cols=4)
    h = t3.rows[0].cells
    h[0].text = "#"
    h[1].text = "Key"
    h[2].text = "Found"
    h[3].text = "Index / hint"
    for i, k, o in rows[:config.max_rows_preview]:
        r = t3.add_row().cells
        r[0].text = str(i)
        r[1].text = str(k)
        r[2].text = "yes" if o.found else "no"
        r[3].text = "" if o.position is None else str(o.position)

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_paragraph("")
    doc.add_heading("Reproducibility footer", level=1)

    from . import __version__ as mkbs_version
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph(f"MKBS version: {mkbs_version}")
    doc.add_paragraph(f"Report generated at: {generated_at}")

    doc.add_paragraph("Algorithmic notes:")
    for note in [
        "Keys are resolved pivot-first: the middle key is binary searched, then both key halves recurse on the data window left / right of its position.",
        "Each outcome is written to the slot of its key, so output order matches input order.",
        "Fast mode skips keys outside the window bounds and leaves their insertion hint unresolved.",
    ]:
        doc.add_paragraph(note, style="List Bullet")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
