"""Helpers shared by the CLI command modules."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import IO

import click

from stockroom.infrastructure.config import get_settings
from stockroom.infrastructure.errors import catch_error


def fail(exc: Exception) -> click.ClickException:
    """Map any exception onto a ClickException via the error boundary."""
    _, body = catch_error(exc, get_settings())
    message = body.get("message", body["error"])
    lines = [f"{body['error']}: {message}" if message != body["error"] else message]
    for err in body.get("details", {}).get("errors", []):
        lines.append(f"  {err['field']}: {err['message']}")
    return click.ClickException("\n".join(lines))


def read_payload(stream: IO[str]) -> dict | list:
    """Read a JSON document; numbers with a fraction become Decimal."""
    try:
        return json.load(stream, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Invalid JSON: {exc}")


def split_ids(raw: str | None) -> list[str]:
    """Parse 'red,large' into ['red', 'large']."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
