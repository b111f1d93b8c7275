"""
Tessella CLI

Commands:
- info: Generate an info.json for an image
- validate-info: Validate an info.json file
- compliance: Check an info.json file against a compliance level
- validate-request: Validate image request parameters
- tiles: List tile URIs advertised by an info.json file
- parse-uri: Split an image request URI into its segments
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from tessella.iiif.v3 import (
    ImageRequestParams,
    ImageServiceInfo,
    check_compliance_level,
    generate_info_json,
    generate_standard_sizes,
    generate_standard_tiles,
    get_info_tile_uris,
    load_info,
    load_json,
    parse_image_uri,
    validate_image_request,
    validate_info_json,
)
from tessella.iiif.v3.tiles import DEFAULT_SCALE_FACTORS, DEFAULT_TILE_SIZE, calculate_scale_factors

app = typer.Typer(add_completion=False, help="IIIF Image API 3.0 tooling")

DEFAULT_IIIF_PROFILE = "level0"
DEFAULT_IIIF_FORMAT = "jpg"
DEFAULT_IIIF_QUALITY = "default"
DEFAULT_IIIF_REGION = "full"
DEFAULT_IIIF_SIZE = "max"
DEFAULT_IIIF_ROTATION = "0"


# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Fields passed via `extra=` (paths, error counts, missing features...)
    are copied into the object; values that are not JSON-serializable are
    written as their repr.
    """
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for k, v in record.__dict__.items():
            if k in _RECORD_ATTRS or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("tessella")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("tessella")

LOG_LEVEL_OPTION = typer.Option(
    "WARNING", "--log-level", help="Logging verbosity (DEBUG, INFO, WARNING, ERROR)"
)


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _read_info_file(path: Path) -> dict[str, Any]:
    try:
        return load_json(path)
    except (OSError, json.JSONDecodeError) as e:
        LOGGER.error("info_unreadable", extra={"path": str(path), "error": str(e)})
        typer.echo(f"❌ Could not read {path}: {e}", err=True)
        raise typer.Exit(code=1)


def _load_info_model(path: Path) -> ImageServiceInfo:
    try:
        return load_info(path)
    except (OSError, json.JSONDecodeError) as e:
        LOGGER.error("info_unreadable", extra={"path": str(path), "error": str(e)})
        typer.echo(f"❌ Could not read {path}: {e}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as e:
        LOGGER.error("info_invalid", extra={"path": str(path), "errors": e.error_count()})
        typer.echo(f"❌ {path} is not a valid info.json:\n{e}", err=True)
        raise typer.Exit(code=2)


@app.command("info")
def info_cmd(
    width: int = typer.Argument(..., help="Full image width in pixels"),
    height: int = typer.Argument(..., help="Full image height in pixels"),
    service_id: str = typer.Option(..., "--id", help="Image service base URI"),
    profile: str = typer.Option(DEFAULT_IIIF_PROFILE, "--profile", help="Compliance level"),
    tile_size: int = typer.Option(
        DEFAULT_TILE_SIZE, "--tile-size", help="Tile width/height; 0 omits tiles"
    ),
    auto_scale_factors: bool = typer.Option(
        False, "--auto-scale-factors", help="Derive scale factors from the image size"
    ),
    size_widths: list[int] | None = typer.Option(
        None, "--size", help="Width to offer in sizes (repeatable)"
    ),
    rights: str | None = typer.Option(None, "--rights", help="Rights statement URI"),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Print a generated info.json for an image of the given size."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    extras: dict[str, Any] = {"rights": rights}
    if tile_size > 0:
        if auto_scale_factors:
            scale_factors = calculate_scale_factors(width, height, tile_size)
        else:
            scale_factors = list(DEFAULT_SCALE_FACTORS)
        extras["tiles"] = generate_standard_tiles(tile_size, scale_factors)
    if size_widths:
        extras["sizes"] = generate_standard_sizes(width, height, size_widths)

    try:
        info = generate_info_json(service_id, width, height, profile, **extras)
    except ValidationError as e:
        typer.echo(f"❌ Invalid parameters:\n{e}", err=True)
        raise typer.Exit(code=2)

    LOGGER.info("info_generated", extra={"id": info.id, "profile": info.profile})
    _echo_json(info.to_json())


@app.command("validate-info")
def validate_info_cmd(
    path: Path = typer.Argument(..., help="info.json file"),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Validate an info.json document against the Image API 3.0 requirements."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    report = validate_info_json(_read_info_file(path))
    LOGGER.info(
        "info_validated",
        extra={
            "path": str(path),
            "valid": report.valid,
            "errors": len(report.errors),
            "warnings": len(report.warnings),
        },
    )

    for warning in report.warnings:
        typer.echo(f"⚠️  {warning}", err=True)

    if not report.valid:
        typer.echo(f"❌ Validation failed: {len(report.errors)} issue(s)\n")
        for i, error in enumerate(report.errors, start=1):
            typer.echo(f"  {i:>3}. {error}")
        raise typer.Exit(code=2)

    typer.echo("✅ Validation passed (Image API 3.0).")


@app.command("compliance")
def compliance_cmd(
    path: Path = typer.Argument(..., help="info.json file"),
    level: str = typer.Option("level2", "--level", help="Target compliance level"),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Check whether an info.json declares everything a compliance level requires."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    if level not in ("level0", "level1", "level2"):
        raise typer.BadParameter(f"Unknown compliance level: {level}", param_hint="--level")

    info = _load_info_model(path)
    result = check_compliance_level(info, level)
    LOGGER.info(
        "compliance_checked",
        extra={
            "path": str(path),
            "level": level,
            "compliant": result.compliant,
            "missing_features": result.missing_features,
        },
    )

    if result.missing_formats:
        typer.echo(f"⚠️  Missing formats: {', '.join(result.missing_formats)}", err=True)
    if result.missing_qualities:
        typer.echo(f"⚠️  Missing qualities: {', '.join(result.missing_qualities)}", err=True)

    if not result.compliant:
        typer.echo(f"❌ Not {level} compliant: {len(result.missing_features)} missing feature(s)\n")
        for feature in result.missing_features:
            typer.echo(f"  - {feature}")
        raise typer.Exit(code=2)

    typer.echo(f"✅ Compliant with {level}.")


@app.command("validate-request")
def validate_request_cmd(
    region: str = typer.Argument(DEFAULT_IIIF_REGION, help="IIIF region (e.g., full)"),
    size: str = typer.Argument(DEFAULT_IIIF_SIZE, help="IIIF size (e.g., max)"),
    rotation: str = typer.Argument(DEFAULT_IIIF_ROTATION, help="IIIF rotation (e.g., 0)"),
    quality: str = typer.Argument(DEFAULT_IIIF_QUALITY, help="IIIF quality (e.g., default)"),
    fmt: str = typer.Argument(DEFAULT_IIIF_FORMAT, help="IIIF format (e.g., jpg, png)"),
    info_path: Path | None = typer.Option(
        None, "--info", help="info.json describing the target service"
    ),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Validate image request parameters, optionally against a service's info.json."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    info = _read_info_file(info_path) if info_path is not None else None
    params = ImageRequestParams(
        region=region, size=size, rotation=rotation, quality=quality, format=fmt
    )
    report = validate_image_request(params, info)
    LOGGER.info("request_validated", extra={"valid": report.valid, "errors": report.errors})

    if not report.valid:
        typer.echo(f"❌ Invalid request: {len(report.errors)} issue(s)\n")
        for i, error in enumerate(report.errors, start=1):
            typer.echo(f"  {i:>3}. {error}")
        raise typer.Exit(code=2)

    typer.echo("✅ Request is valid.")


@app.command("tiles")
def tiles_cmd(
    path: Path = typer.Argument(..., help="info.json file"),
    scale_factor: int | None = typer.Option(
        None, "--scale-factor", help="Only list tiles at this scale factor"
    ),
    fmt: str = typer.Option(DEFAULT_IIIF_FORMAT, "--format", help="IIIF format (e.g., jpg, png)"),
    quality: str = typer.Option(DEFAULT_IIIF_QUALITY, "--quality", help="IIIF quality (e.g., default)"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write URIs to this file instead of stdout"
    ),
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """
    List the tile URIs an info.json advertises.

    Example:
        tessella tiles info.json --scale-factor 4 -o tiles.txt
    """
    global LOGGER
    LOGGER = setup_logging(log_level)

    info = _load_info_model(path)
    if not info.tiles:
        typer.echo(f"❌ {path} declares no tiles.", err=True)
        raise typer.Exit(code=2)

    uris = get_info_tile_uris(info, fmt, quality, scale_factor=scale_factor)
    if not uris:
        typer.echo(f"❌ No tile configuration offers scale factor {scale_factor}.", err=True)
        raise typer.Exit(code=2)

    LOGGER.info("tiles_listed", extra={"id": info.id, "count": len(uris)})

    if output is not None:
        output = output.expanduser()
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as f:
            for uri in uris:
                f.write(f"{uri}\n")
        typer.echo(f"Wrote {len(uris)} tile URI(s) to {output}")
        return

    for uri in uris:
        typer.echo(uri)


@app.command("parse-uri")
def parse_uri_cmd(
    uri: str = typer.Argument(..., help="Image request URI"),
) -> None:
    """Print the segments of an image request URI as JSON."""
    parsed = parse_image_uri(uri)
    if parsed is None:
        typer.echo(f"Not an image request URI: {uri}", err=True)
        raise typer.Exit(code=2)

    _echo_json(
        {
            "baseUri": parsed.base_uri,
            "identifier": parsed.identifier,
            "region": parsed.region,
            "size": parsed.size,
            "rotation": parsed.rotation,
            "quality": parsed.quality,
            "format": parsed.format,
        }
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
