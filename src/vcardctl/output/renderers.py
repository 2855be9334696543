"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from vcardctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from vcardctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    if result.ok and result.op == "render_card":
        return _render_card_text(result, verbose=verbose)

    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Rendered cards are still printed in full; everything else collapses
    to a single status line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op == "render_card":
        return str(result.data["text"])
    if result.op == "export_qr":
        return str(result.data["path"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="vc.ok")
    op = Text(f"  {result.op}", style="vc.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="vc.key")
    if key == "version":
        v = Text(str(value), style="vc.version")
    elif key == "path":
        v = Text(str(value), style="vc.path")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including the telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(console: Console, span_data: dict[str, Any], indent: int = 4) -> None:
    prefix = " " * indent
    duration = span_data.get("duration_ms", 0.0)
    style = "yellow" if duration > 100 else "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span_data.get('name', '?')}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="vc.error")
    op = Text(f"  {result.op}", style="vc.op")
    console.print(label, op, Text(" — "), Text(msg), sep="")

    if err and err.detail and (verbose or err.code == "invalid_field"):
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            if k == "errors" and isinstance(v, list):
                for item in v:
                    loc = ".".join(item.get("loc", []))
                    console.print(Text(f"    {loc}: {item.get('msg', '')}"))
            else:
                console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_card_text(result: ServiceResult, *, verbose: bool = False) -> str:
    """Return the vCard document byte-for-byte so it can be piped to a file.

    Only the verbose meta block goes through Rich; the document never does.
    """
    text = str(result.data["text"])
    if not verbose or not result.meta:
        return text
    console = create_console()
    _render_meta(console, result)
    meta = get_output(console).rstrip("\n")
    return f"{text}\n{meta}"


def _render_validation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "version", result.data.get("version", ""))
    _field(console, "fields", result.data.get("field_count", 0))

    kinds: dict[str, int] = result.data.get("kinds", {})
    if kinds:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Kind", style="vc.kind")
        table.add_column("Count", justify="right")
        for kind, count in kinds.items():
            table.add_row(kind, str(count))
        console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_versions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    default = result.data.get("default")
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Version", style="vc.version", no_wrap=True)
    table.add_column("Required fields", style="vc.kind")
    table.add_column("Default", justify="center")
    for entry in result.data.get("versions", []):
        version = entry["version"]
        table.add_row(version, ", ".join(entry["required"]), "*" if version == default else "")
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_qr_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "version", "width", "height", "bytes"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "validate_card": _render_validation,
    "list_versions": _render_versions,
    "export_qr": _render_qr_export,
}
