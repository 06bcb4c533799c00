from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from ..config import LoaderConfig, load_config
from ..core.diagnostics import IssueCollector
from ..core.errors import SceneError
from ..core.scene import Scene
from ..core.sniff import SceneFormat, detect_format
from ..core.source import FileSource
from ..sdk import load, parse_document

app = typer.Typer(help="rtscene scene decoding utilities")

_FORMATS = {f.value for f in SceneFormat}


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("rtscene").setLevel(numeric)


def _resolve_config(config: Optional[Path], fmt: Optional[str], root_key: Optional[str]) -> LoaderConfig:
    cfg = load_config(config) if config is not None else LoaderConfig()
    if fmt is not None:
        if fmt.lower() not in _FORMATS:
            raise typer.BadParameter(f"format must be one of {sorted(_FORMATS)}", param_hint="--format")
        cfg.format = fmt.lower()
    if root_key is not None:
        cfg.root_key = root_key or None
    return cfg


def _summary(scene: Scene) -> list[str]:
    lines = [
        f"cameras: {len(scene.cameras)}",
        f"materials: {len(scene.materials)}",
        f"point lights: {len(scene.lights.points)}",
        f"vertices: {len(scene.vertex_data)}",
        f"objects: {len(scene.objects)}",
    ]
    for kind in ("sphere", "plane", "triangle", "mesh"):
        count = len(scene.objects_of(kind))
        if count:
            lines.append(f"  {kind}: {count}")
    for camera in scene.cameras:
        width, height = camera.image_resolution
        lines.append(f"camera {camera.id or '-'}: {width}x{height} -> {camera.image_name}")
    return lines


@app.command("inspect")
def inspect(
    scene: Path = typer.Argument(..., exists=True, readable=True, help="Path to a JSON or XML scene."),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Input format: auto, json or xml."),
    root_key: Optional[str] = typer.Option(None, "--root-key", help="Key the scene body lives under (empty for none)."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="Loader YAML config."),
    issues: bool = typer.Option(False, "--issues", help="Print non-fatal decode notices."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Decode a scene and print a short summary."""

    _configure_logging(log_level)
    cfg = _resolve_config(config, fmt, root_key)
    collector = IssueCollector()
    try:
        result = load(scene, cfg.root_key, collector=collector, config=cfg)
    except SceneError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    for line in _summary(result):
        typer.echo(line)
    if issues or cfg.collect_issues:
        typer.echo(f"issues: {len(collector)}")
        for issue in collector:
            typer.echo(f"  {issue}")


@app.command("tree")
def tree(
    scene: Path = typer.Argument(..., exists=True, readable=True, help="Path to a JSON or XML scene."),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Input format: auto, json or xml."),
    root_key: Optional[str] = typer.Option(None, "--root-key", help="Key XML documents are wrapped under."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="Loader YAML config."),
) -> None:
    """Print the normalized generic tree of a scene file as JSON."""

    cfg = _resolve_config(config, fmt, root_key)
    try:
        data = FileSource(scene, max_bytes=cfg.max_bytes).read()
        hint = SceneFormat(cfg.format)
        if hint is SceneFormat.AUTO:
            hint = SceneFormat.from_path(scene)
        document = parse_document(data, detect_format(data, hint), cfg.root_key, allow_nan=cfg.allow_nan)
    except SceneError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(document, indent=2))


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
