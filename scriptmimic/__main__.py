"""
ScriptMimic CLI
 • analyze   – extract a Style DNA profile from transcript files
 • generate  – topic → normalised topic → editorial plan → full script
 • profiles / show / delete / scripts – browse the local library
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import typer
from rich import print
from rich.markup import escape

from scriptmimic import logconf
from scriptmimic.analysis import ensure_unique_name, extract_style_profile
from scriptmimic.config import Settings, load_settings
from scriptmimic.errors import ScriptMimicError
from scriptmimic.models import GeneratedScript
from scriptmimic.pipeline import Stage, run_generation_pipeline
from scriptmimic.storage import JsonFileStore

app = typer.Typer(pretty_exceptions_show_locals=False, no_args_is_help=True)


class _Ctx:
    settings: Settings
    store: JsonFileStore
    owner: str


def _fail(e: object) -> None:
    print(f"[red]✘ {escape(str(e))}[/]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="JSON settings file"),
    owner: str = typer.Option("local", "--owner", help="license / owner key"),
    log_level: str | None = typer.Option(None, "--log-level"),
):
    state = _Ctx()
    state.settings = load_settings(config)
    if config:
        print(f"[yellow]Loaded settings from {config}[/]")
    logconf.init(log_level or state.settings.log_level, state.settings.log_dir)
    state.store = JsonFileStore(state.settings.store_dir)
    state.owner = owner
    ctx.obj = state


@app.command()
def analyze(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="profile name (unique per owner)"),
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="transcript files"),
):
    """Extract a Style DNA profile from one or more transcripts."""
    s: _Ctx = ctx.obj
    transcripts = [f.read_text(encoding="utf-8") for f in files]
    try:
        ensure_unique_name(s.store.list_all(s.owner, "dnas"), name)
        print(f"[cyan]Analysing {len(files)} transcript(s)…[/]")
        dna = extract_style_profile(transcripts, name, settings=s.settings)
    except ScriptMimicError as e:
        _fail(e)
    s.store.put(s.owner, "dnas", dna)
    print(f"[green]✔ Profile {dna.name!r} saved as {dna.id}[/]")


@app.command()
def generate(
    ctx: typer.Context,
    profile_id: str = typer.Argument(...),
    topic: str = typer.Argument(..., help="topic or outline"),
    words: int = typer.Option(1000, "--words", min=1, help="target word count"),
    out: Path | None = typer.Option(None, "--out", help="also write the script here"),
):
    """Generate a script for TOPIC in the style of PROFILE_ID."""
    s: _Ctx = ctx.obj
    dna = s.store.get(s.owner, "dnas", profile_id)
    if dna is None:
        _fail(f"No style profile with id {profile_id!r}")

    def report(stage: Stage) -> None:
        print(f"[cyan]» {stage.label}[/]")

    try:
        content = run_generation_pipeline(topic, dna, words, report, settings=s.settings)
    except ScriptMimicError as e:
        _fail(e)

    script = GeneratedScript.create(topic, content, dna)
    s.store.put(s.owner, "scripts", script)
    if out:
        out.write_text(content, encoding="utf-8")
        print(f"[green]✔ Script written to {out}[/]")
    else:
        typer.echo(content)
    print(f"[green]✔ Script saved as {script.id}[/]")


@app.command()
def profiles(ctx: typer.Context):
    """List saved style profiles."""
    s: _Ctx = ctx.obj
    for dna in s.store.list_all(s.owner, "dnas"):
        print(f"{dna.id}\t{dna.name}\t{dna.created_at:%Y-%m-%d %H:%M}")


@app.command()
def show(ctx: typer.Context, profile_id: str):
    """Print one profile as JSON."""
    s: _Ctx = ctx.obj
    dna = s.store.get(s.owner, "dnas", profile_id)
    if dna is None:
        _fail(f"No style profile with id {profile_id!r}")
    typer.echo(json.dumps(dna.to_document(), indent=2, ensure_ascii=False))


@app.command()
def delete(ctx: typer.Context, profile_id: str):
    """Delete a profile."""
    s: _Ctx = ctx.obj
    if s.store.get(s.owner, "dnas", profile_id) is None:
        _fail(f"No style profile with id {profile_id!r}")
    s.store.delete(s.owner, "dnas", profile_id)
    print(f"[green]✔ Deleted {profile_id}[/]")


@app.command()
def scripts(ctx: typer.Context):
    """List saved scripts."""
    s: _Ctx = ctx.obj
    for sc in s.store.list_all(s.owner, "scripts"):
        print(f"{sc.id}\t{sc.dna_name}\t{sc.topic[:60]}")


if __name__ == "__main__":
    app()
