"""Command-line interface for sending one-off REST requests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import os
import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install vault-rest[cli]' to enable this command."
    ) from exc

from .config import RestConfig
from .exceptions import RestError
from .http import RestResponse
from .rest import Rest, Verb

app = typer.Typer(help="Send form-encoded requests to a REST API.", no_args_is_help=True)


def _parse_pairs(values: list[str] | None, separator: str, label: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values or []:
        if separator not in item:
            raise typer.BadParameter(f"{label} {item!r} must look like name{separator}value.")
        name, value = item.split(separator, 1)
        if not name.strip():
            raise typer.BadParameter(f"{label} {item!r} has an empty name.")
        pairs[name.strip()] = value
    return pairs


def _build_request(
    url: str,
    params: list[str] | None,
    headers: list[str] | None,
    data: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
) -> Rest:
    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if not verify_ssl:
            raise typer.BadParameter("Cannot combine --cert with --no-verify.")
        verify_target = str(expanded_cert)
    else:
        verify_target = verify_ssl

    rest = Rest(RestConfig(read_timeout=timeout, verify_ssl=verify_target)).set_url(url)
    for name, value in _parse_pairs(params, "=", "Parameter").items():
        rest.add_parameter(name, value)
    for name, value in _parse_pairs(headers, ":", "Header").items():
        rest.add_header(name, value.strip())
    if data is not None:
        rest.body(data)
    return rest


console = Console(force_terminal=False, color_system=None)


def _render_summary(verb: Verb, url: str, response: RestResponse) -> None:
    table = Table(
        title=f"{verb.value} {url}",
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    table.add_column("Status", justify="right")
    table.add_column("Mime Type")
    table.add_column("Bytes", justify="right")
    table.add_row(str(response.status), response.mime_type or "-", str(len(response.body)))
    console.print(table)


def _present_output(verb: Verb, url: str, response: RestResponse, *, json_output: bool) -> None:
    text = response.body.decode("utf-8", errors="replace")
    if json_output:
        envelope = {
            "status": response.status,
            "mimeType": response.mime_type,
            "headers": dict(response.headers),
            "body": text,
        }
        typer.echo(json.dumps(envelope, indent=2))
        return
    _render_summary(verb, url, response)
    if text:
        typer.echo(text)


def _handle_rest_error(exc: RestError) -> None:
    message = f"Request failed: {exc}"
    if exc.cause is not None:
        message += f"\nCause: {exc.cause.__class__.__name__}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    # Respect VAULT_REST_VERIFY_SSL environment variable when present.
    env_verify = os.getenv("VAULT_REST_VERIFY_SSL")
    if env_verify is None:
        default_verify = True
    else:
        default_verify = env_verify.strip().lower() not in {"0", "false", "no", "off"}

    return {
        "url": typer.Argument(..., help="Absolute http(s) URL of the resource."),
        "params": typer.Option(
            None,
            "--param",
            "-p",
            help="Request parameter as name=value; may be repeated.",
        ),
        "headers": typer.Option(
            None,
            "--header",
            "-H",
            help="Request header as name:value; may be repeated.",
        ),
        "data": typer.Option(
            None,
            "--data",
            "-d",
            help="Raw request body sent instead of the encoded parameters.",
        ),
        "verify_ssl": typer.Option(
            default_verify,
            "--verify/--no-verify",
            envvar="VAULT_REST_VERIFY_SSL",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="VAULT_REST_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(
            30.0,
            "--timeout",
            envvar="VAULT_REST_TIMEOUT",
            help="Read timeout (seconds).",
            show_default=True,
        ),
        "output_json": typer.Option(
            False,
            "--json",
            "-j",
            help="Print a JSON envelope instead of a summary table.",
        ),
    }


_SHARED_OPTIONS = _shared_options()


def _run(
    verb: Verb,
    url: str,
    params: list[str] | None,
    headers: list[str] | None,
    data: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
    output_json: bool,
) -> None:
    rest = _build_request(url, params, headers, data, verify_ssl, cert_path, timeout)
    try:
        response = getattr(rest, verb.value.lower())()
    except RestError as exc:
        _handle_rest_error(exc)
        return
    _present_output(verb, url, response, json_output=output_json)


@app.command("get")
def get_command(
    url: str = _SHARED_OPTIONS["url"],
    params: list[str] | None = _SHARED_OPTIONS["params"],
    headers: list[str] | None = _SHARED_OPTIONS["headers"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Send a GET request; parameters are appended to the query string."""

    _run(Verb.GET, url, params, headers, None, verify_ssl, cert_path, timeout, output_json)


@app.command("delete")
def delete_command(
    url: str = _SHARED_OPTIONS["url"],
    params: list[str] | None = _SHARED_OPTIONS["params"],
    headers: list[str] | None = _SHARED_OPTIONS["headers"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Send a DELETE request; parameters are appended to the query string."""

    _run(Verb.DELETE, url, params, headers, None, verify_ssl, cert_path, timeout, output_json)


@app.command("post")
def post_command(
    url: str = _SHARED_OPTIONS["url"],
    params: list[str] | None = _SHARED_OPTIONS["params"],
    headers: list[str] | None = _SHARED_OPTIONS["headers"],
    data: str | None = _SHARED_OPTIONS["data"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Send a POST request; parameters are form-encoded into the body."""

    _run(Verb.POST, url, params, headers, data, verify_ssl, cert_path, timeout, output_json)


@app.command("put")
def put_command(
    url: str = _SHARED_OPTIONS["url"],
    params: list[str] | None = _SHARED_OPTIONS["params"],
    headers: list[str] | None = _SHARED_OPTIONS["headers"],
    data: str | None = _SHARED_OPTIONS["data"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """Send a PUT request; parameters are form-encoded into the body."""

    _run(Verb.PUT, url, params, headers, data, verify_ssl, cert_path, timeout, output_json)


def main() -> None:  # pragma: no cover - console entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
