"""Command-line interface for chordscribe.

Provides commands for:
- analyze: Detect chords in an audio file
- export: Detect chords and write them as a MIDI file
- info: Show audio file information
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import AnalysisConfig, SynthesisConfig, load_config
from .core import ChordSegment, ChordscribeError

app = typer.Typer(
    name="chordscribe",
    help="Audio to chord chart and MIDI",
    rich_markup_mode="markdown",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    logging.captureWarnings(True)


def _build_configs(
    config_file: Optional[Path],
    frame_size: Optional[int],
    hop_size: Optional[int],
    min_duration: Optional[float],
    workers: Optional[int],
) -> Tuple[AnalysisConfig, SynthesisConfig]:
    analysis, synthesis = load_config(str(config_file) if config_file else None)
    overrides = {
        "frame_size": frame_size,
        "hop_size": hop_size,
        "min_chord_duration": min_duration,
        "workers": workers,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        analysis = replace(analysis, **overrides)
    return analysis, synthesis


def _load_audio(input_file: Path, sample_rate: Optional[int]):
    from .input import AudioLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    loader = AudioLoader(target_sr=sample_rate)
    try:
        return loader.load(str(input_file))
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


# Shared options
FRAME_SIZE = typer.Option(None, "--frame-size", help="Analysis frame size in samples")
HOP_SIZE = typer.Option(None, "--hop-size", help="Hop between frames in samples")
MIN_DURATION = typer.Option(
    None, "--min-duration", "-m", help="Drop chords shorter than this (seconds)"
)
WORKERS = typer.Option(None, "--workers", "-w", help="Threads used for frame analysis")
SAMPLE_RATE = typer.Option(
    22050, "--sr", help="Resample audio to this rate before analysis"
)
CONFIG_FILE = typer.Option(None, "--config", "-c", help="JSON configuration file")
VERBOSE = typer.Option(False, "-v", "--verbose", help="Verbose output")


@app.command()
def analyze(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    frame_size: Optional[int] = FRAME_SIZE,
    hop_size: Optional[int] = HOP_SIZE,
    min_duration: Optional[float] = MIN_DURATION,
    workers: Optional[int] = WORKERS,
    sample_rate: int = SAMPLE_RATE,
    config_file: Optional[Path] = CONFIG_FILE,
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = VERBOSE,
):
    """Detect chords in an audio file.

    **Examples:**

        chordscribe analyze song.wav

        chordscribe analyze song.mp3 --min-duration 1.0 --json
    """
    from .pipeline import transcribe

    _setup_logging(verbose)
    try:
        analysis, synthesis = _build_configs(
            config_file, frame_size, hop_size, min_duration, workers
        )
        audio = _load_audio(input_file, sample_rate)
        if not json_output:
            console.print(f"[blue]Analyzing:[/blue] {input_file} ({audio.duration:.2f}s)")
        result = transcribe(audio, analysis, synthesis)
    except ChordscribeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print_json(data={
            "input": str(input_file),
            "duration": result.duration,
            "chords": [s.to_dict() for s in result.segments],
        })
        return

    if not result.segments:
        console.print("[yellow]No chords detected![/yellow]")
        return

    _show_chords_table(result.segments)
    console.print(f"\n[green]Progression: {' - '.join(result.labels)}[/green]")


@app.command()
def export(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Output MIDI file path"
    ),
    melody: bool = typer.Option(
        False, "--melody/--no-melody", help="Add an arpeggiated melody track"
    ),
    tempo: Optional[float] = typer.Option(
        None, "-t", "--tempo", help="Tempo (BPM) written to the MIDI file"
    ),
    frame_size: Optional[int] = FRAME_SIZE,
    hop_size: Optional[int] = HOP_SIZE,
    min_duration: Optional[float] = MIN_DURATION,
    workers: Optional[int] = WORKERS,
    sample_rate: int = SAMPLE_RATE,
    config_file: Optional[Path] = CONFIG_FILE,
    verbose: bool = VERBOSE,
):
    """Detect chords and write them as a MIDI file.

    **Examples:**

        chordscribe export song.wav

        chordscribe export song.wav -o chords.mid --melody --tempo 96
    """
    from .output import MIDIExporter
    from .pipeline import transcribe

    _setup_logging(verbose)
    if output is None:
        output = input_file.with_suffix(".mid")

    try:
        analysis, synthesis = _build_configs(
            config_file, frame_size, hop_size, min_duration, workers
        )
        synthesis = replace(synthesis, melody=melody or synthesis.melody)
        if tempo is not None:
            synthesis = replace(synthesis, tempo=tempo)

        audio = _load_audio(input_file, sample_rate)
        console.print(f"[blue]Analyzing:[/blue] {input_file} ({audio.duration:.2f}s)")
        result = transcribe(audio, analysis, synthesis)
    except ChordscribeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"  Detected {len(result.segments)} chords")
    if verbose and result.segments:
        _show_chords_table(result.segments)

    console.print(f"[blue]Exporting to:[/blue] {output}")
    MIDIExporter().export(result.notes, str(output))
    for track in result.notes.tracks:
        console.print(f"  {track.name}: {len(track)} notes")
    console.print("[green]Export complete![/green]")


@app.command()
def info(
    input_file: Path = typer.Argument(..., help="Input audio file"),
    sample_rate: int = SAMPLE_RATE,
    frame_size: Optional[int] = FRAME_SIZE,
    hop_size: Optional[int] = HOP_SIZE,
):
    """Show information about an audio file."""
    from .analysis import FrameSequencer

    try:
        analysis, _ = _build_configs(None, frame_size, hop_size, None, None)
    except ChordscribeError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    audio = _load_audio(input_file, sample_rate)
    sequencer = FrameSequencer(analysis.frame_size, analysis.hop_size)

    console.print(f"\n[bold]Audio Info:[/bold] {input_file.name}")
    console.print(f"  Duration: {audio.duration:.2f} seconds")
    console.print(f"  Sample rate: {audio.sample_rate} Hz")
    console.print(f"  Samples: {len(audio):,}")
    console.print(
        f"  Frames: {sequencer.count(len(audio)):,} "
        f"({analysis.frame_size}/{analysis.hop_size})"
    )


def _show_chords_table(segments: List[ChordSegment]):
    """Display chords in a table."""
    table = Table(title="Detected Chords")
    table.add_column("Chord", style="cyan")
    table.add_column("Time", style="yellow")
    table.add_column("Duration (s)", style="green")
    table.add_column("Confidence", style="magenta")

    for segment in segments:
        table.add_row(
            segment.label,
            f"{segment.start:.2f}-{segment.end:.2f}s",
            f"{segment.duration:.2f}",
            f"{segment.confidence:.2f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
