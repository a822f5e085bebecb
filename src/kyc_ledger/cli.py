"""CLI entry point for the compliance ledger."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import click

from .core.config import Settings, load_settings
from .core.errors import ConfigError, LedgerError
from .core.events import LedgerEvent
from .observability.logger import get_logger, new_trace_id, setup_logging
from .token import CompliantToken

# op name -> (required argument names, call)
_CALLS: dict[str, tuple[tuple[str, ...], Callable[[CompliantToken, dict[str, Any]], Any]]] = {
    "approve": (
        ("caller", "spender", "amount"),
        lambda t, c: t.approve(c["caller"], c["spender"], c["amount"]),
    ),
    "transfer": (
        ("caller", "to", "amount"),
        lambda t, c: t.transfer(c["caller"], c["to"], c["amount"]),
    ),
    "transfer_from": (
        ("caller", "from", "to", "amount"),
        lambda t, c: t.transfer_from(c["caller"], c["from"], c["to"], c["amount"]),
    ),
    "propose_add_to_allowlist": (
        ("caller", "target"),
        lambda t, c: t.propose_add_to_allowlist(c["caller"], c["target"]),
    ),
    "propose_remove_from_allowlist": (
        ("caller", "target"),
        lambda t, c: t.propose_remove_from_allowlist(c["caller"], c["target"]),
    ),
    "sign": (
        ("caller", "operation_id"),
        lambda t, c: t.sign(c["caller"], c["operation_id"]),
    ),
    "execute": (
        ("caller", "operation_id"),
        lambda t, c: t.execute(c["caller"], c["operation_id"]),
    ),
}

# Arguments naming an account; amounts and operation ids are checked by the token.
_ACCOUNT_ARGS = frozenset({"caller", "spender", "to", "from", "target"})


def _load(config: str | None) -> Settings:
    try:
        return load_settings(config)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def main() -> None:
    """Compliance-gated ledger with multisig allowlist governance."""


@main.command("show-config")
@click.option("--config", default=None, help="Config file path")
def show_config(config: str | None) -> None:
    """Print the resolved settings as JSON."""
    click.echo(_load(config).model_dump_json(indent=2))


@main.command()
@click.option("--config", default="configs/ledger.toml", help="Config file path")
@click.option(
    "--calls", "calls_path", required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="JSONL file, one call per line",
)
@click.option("--snapshot/--no-snapshot", default=True, help="Print final state")
@click.option("--strict", is_flag=True, help="Exit non-zero if any call fails")
@click.option("--log-level", default=None, help="Override observability.log_level")
def run(
    config: str,
    calls_path: str,
    snapshot: bool,
    strict: bool,
    log_level: str | None,
) -> None:
    """Replay a script of calls against a freshly built ledger.

    Every call is atomic on its own: a failing line is reported with its
    error code and the replay continues with the next line.
    """
    settings = _load(config)
    setup_logging(
        level=log_level or settings.observability.log_level,
        format=settings.observability.log_format,
    )
    log = get_logger("kyc_ledger.cli")

    try:
        token = CompliantToken.from_settings(settings)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    def _echo_event(event: LedgerEvent) -> None:
        click.echo(json.dumps({"event": event.model_dump(mode="json")}))

    token.subscribe(_echo_event)

    failures = 0
    with open(calls_path) as f:
        for lineno, raw in enumerate(f, start=1):
            raw = raw.strip()
            if not raw or raw.startswith("#"):
                continue
            new_trace_id()
            outcome = _apply_line(token, lineno, raw)
            if not outcome["ok"]:
                failures += 1
                log.warning("call_failed", line=lineno, error=outcome["error"])
            click.echo(json.dumps(outcome))

    if snapshot:
        click.echo(json.dumps({"snapshot": token.snapshot().model_dump(mode="json")}))

    if strict and failures:
        raise click.ClickException(f"{failures} call(s) failed")


def _apply_line(token: CompliantToken, lineno: int, raw: str) -> dict[str, Any]:
    try:
        call = json.loads(raw)
    except json.JSONDecodeError as exc:
        return {"line": lineno, "ok": False, "error": "InvalidCall", "message": str(exc)}
    if not isinstance(call, dict):
        return {"line": lineno, "ok": False, "error": "InvalidCall",
                "message": "call must be a JSON object"}

    op = call.get("op", "")
    if not isinstance(op, str) or op not in _CALLS:
        return {"line": lineno, "op": op, "ok": False, "error": "InvalidCall",
                "message": f"unknown op {op!r}"}
    required, fn = _CALLS[op]
    missing = [name for name in required if name not in call]
    if missing:
        return {"line": lineno, "op": op, "ok": False, "error": "InvalidCall",
                "message": f"missing arguments: {missing}"}
    not_str = [n for n in required if n in _ACCOUNT_ARGS and not isinstance(call[n], str)]
    if not_str:
        return {"line": lineno, "op": op, "ok": False, "error": "InvalidCall",
                "message": f"account arguments must be strings: {not_str}"}

    try:
        result = fn(token, call)
    except LedgerError as exc:
        return {"line": lineno, "op": op, "ok": False, "error": exc.code,
                "message": str(exc)}
    return {"line": lineno, "op": op, "ok": True, "result": result}
