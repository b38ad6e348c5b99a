"""Operation-specific rich renderers for ServiceResult.

Each renderer writes to a StringIO-backed Console; the caller extracts
the text with ``get_output``. Renderers are dispatched on ``result.op``
and unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from slanger.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from slanger.services.result import ServiceResult

type Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* to text via rich (plain when not on a terminal)."""
    console = create_console()
    if result.op in _OP_RENDERERS and (result.ok or result.data):
        _OP_RENDERERS[result.op](result, console, verbose=verbose)
    elif result.ok:
        _render_generic(result, console, verbose=verbose)
    if not result.ok:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "cache_key":
        return str(result.data.get("key", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="sl.ok") if result.ok else Text("FAIL", style="sl.error")
    console.print(label, Text(f"  {result.op}", style="sl.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="sl.key")
    if key.endswith("_id") or key == "key":
        v = Text(str(value), style="sl.id")
    else:
        v = Text(str(value))
    console.print(k, v)


def _issue_line(console: Console, issue: dict[str, Any]) -> None:
    severity = str(issue.get("severity", "warning"))
    style = style_for_severity(severity)
    line = Text("  ")
    line.append(severity, style=style)
    line.append(" ")
    line.append(str(issue.get("ruleId", "")), style="sl.rule")
    line.append(f" {issue.get('message', '')}")
    if issue.get("entityRef"):
        line.append(f" (ref: {issue['entityRef']})", style="dim")
    console.print(line)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    duration = span_data.get("duration_ms", 0.0)
    style = "bold red" if duration > 1000 else "yellow" if duration > 100 else "dim"
    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span_data.get('name', '?')}")
    extras = {k: span_data[k] for k in ("cache", "attempts") if k in span_data}
    extras.update(span_data.get("annotations", {}))
    if extras:
        line.append("  " + ", ".join(f"{k}={v}" for k, v in extras.items()), style="dim")
    console.print(line)
    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="sl.error")
    op = Text(f"  {result.op}", style="sl.op")
    console.print(label, op, Text(" — "), msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Issues grouped by validation module, then a per-module summary."""
    d = result.data
    errors: list[dict[str, Any]] = d.get("errors", [])
    warnings: list[dict[str, Any]] = d.get("warnings", [])

    if not errors and not warnings:
        console.print(f"[sl.ok]OK[/sl.ok]  {d.get('document_id')} is valid. No issues found.")
    by_module: dict[str, list[dict[str, Any]]] = {}
    for issue in [*errors, *warnings]:
        by_module.setdefault(str(issue.get("module", "unknown")), []).append(issue)
    for module, issues in by_module.items():
        console.print(f"\n[bold]{module}[/bold]")
        for issue in issues:
            _issue_line(console, issue)

    summary: dict[str, dict[str, Any]] = d.get("summary", {})
    if verbose and summary:
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Pass")
        table.add_column("Passed")
        table.add_column("Errors", justify="right")
        table.add_column("Warnings", justify="right")
        for module, outcome in summary.items():
            table.add_row(
                module,
                "yes" if outcome.get("passed") else "no",
                str(outcome.get("errorCount", 0)),
                str(outcome.get("warningCount", 0)),
            )
        console.print()
        console.print(table)

    if errors or warnings:
        console.print(f"\n{len(errors)} errors, {len(warnings)} warnings")
    if verbose:
        _render_meta(console, result)


def _render_word(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "form", d.get("form", ""))
    if d.get("syllables"):
        _field(console, "syllables", ".".join(d["syllables"]))
    for issue in d.get("issues", []):
        _issue_line(console, issue)
    if verbose:
        _render_meta(console, result)


def _render_paradigm(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    title = f"{d.get('lexeme_id')} {d.get('orthographic_form', '')} ({d.get('pos')})"
    table = Table(title=title, show_header=True, pad_edge=False, expand=False)
    table.add_column("Label", style="sl.key")
    table.add_column("Form", style="sl.form")
    table.add_column("IPA", style="sl.ipa")
    if verbose:
        table.add_column("Features", style="dim")
    for row in d.get("rows", []):
        cells = [
            str(row.get("label", "")),
            str(row.get("orthographicForm", "")),
            str(row.get("phonologicalForm", "")),
        ]
        if verbose:
            cells.append(", ".join(f"{k}={v}" for k, v in row.get("features", {}).items()))
        table.add_row(*cells)
    console.print(table)
    for issue in d.get("issues", []):
        _issue_line(console, issue)
    if verbose:
        _render_meta(console, result)


def _render_prune(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("document_id", "operation", "original_chars", "pruned_chars", "lexicon", "corpus"):
        if key in d:
            _field(console, key, d[key])
    for section, action in d.get("policy", {}).items():
        _field(console, f"policy.{section}", action)
    if verbose:
        console.print(json.dumps(d.get("document", {}), indent=2, ensure_ascii=False))
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line plus data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":"), ensure_ascii=False))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Renderer] = {
    "validate": _render_validate,
    "word": _render_word,
    "paradigm": _render_paradigm,
    "prune": _render_prune,
    "cache_key": _render_generic,
    "cache_invalidate": _render_generic,
}
