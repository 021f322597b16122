"""dirscope CLI — command-line interface for inspecting Dirfiles.

Commands:
    dirscope info <dir>            Show Dirfile summary
    dirscope fields <dir>          List fields with type and rate
    dirscope get <dir> <field>     Print a field's samples and statistics
    dirscope export <dir>          Export to CSV/HDF5
    dirscope plot <dir>            Plot fields against frame number
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dirscope.config import DirscopeConfig
from dirscope.utils.logging import configure_logging

console = Console()


def _open(directory: Path, library_path: str | None):
    """Open a Dirfile or exit with a readable error."""
    from dirscope import Dirfile, DirfileError
    from dirscope.native.library import load_library, set_library

    try:
        if library_path:
            set_library(load_library(library_path))
        return Dirfile(directory)
    except (DirfileError, FileNotFoundError) as e:
        console.print(f"[red]Error opening {directory}: {e}[/red]")
        raise SystemExit(1)


@click.group()
@click.version_option(version="0.1.0", prog_name="dirscope")
@click.option("--log-level", default=None, help="Log level (default: DIRSCOPE_LOG_LEVEL or WARNING)")
@click.option("--library", "library_path", default=None, envvar="DIRSCOPE_GETDATA_LIBRARY",
              help="Path to libgetdata")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, library_path: str | None) -> None:
    """dirscope — inspect and export Dirfile time-series data."""
    config = DirscopeConfig.from_env()
    if library_path:
        config.library_path = library_path
    if log_level:
        config.log_level = log_level
    configure_logging(config.log_level, json_output=config.log_json)
    ctx.obj = config


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_obj
def info(config: DirscopeConfig, directory: Path) -> None:
    """Show Dirfile summary."""
    from dirscope import DirfileError

    dirfile = _open(directory, config.library_path)
    try:
        nframes, nfields = dirfile.nframes, dirfile.nfields
        rates: dict[int, int] = {}
        for name in dirfile.fields:
            info = dirfile.field_info(name)
            rates[info.spf] = rates.get(info.spf, 0) + 1
    except DirfileError as e:
        console.print(f"[red]Error reading {directory}: {e}[/red]")
        raise SystemExit(1)
    finally:
        dirfile.close()

    console.print()
    console.print(Panel.fit(f"[bold]{dirfile.name}[/bold]", subtitle=f"{directory}"))

    meta_table = Table(show_header=False, box=None, padding=(0, 2))
    meta_table.add_column("Key", style="dim")
    meta_table.add_column("Value")
    meta_table.add_row("Frames", str(nframes))
    meta_table.add_row("Fields", str(nfields))
    console.print(meta_table)

    if rates:
        console.print()
        rate_table = Table(title="Sample Rates")
        rate_table.add_column("Samples/frame", justify="right")
        rate_table.add_column("Fields", justify="right")
        for spf, count in sorted(rates.items()):
            rate_table.add_row(str(spf), str(count))
        console.print(rate_table)

    console.print()


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the summary as JSON")
@click.pass_obj
def fields(config: DirscopeConfig, directory: Path, as_json: bool) -> None:
    """List fields with entry kind, type and samples per frame."""
    dirfile = _open(directory, config.library_path)
    summary = dirfile.describe()
    dirfile.close()

    if as_json:
        click.echo(summary.to_json())
        return

    table = Table(title=f"Fields ({summary.nfields})")
    table.add_column("Field")
    table.add_column("Entry")
    table.add_column("Type")
    table.add_column("SPF", justify="right")
    table.add_column("Samples", justify="right")
    for field_info in summary.fields:
        table.add_row(
            field_info.name,
            field_info.entry_type,
            field_info.native_type,
            str(field_info.spf),
            str(field_info.num_samples),
        )
    console.print(table)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("field")
@click.option("--first-frame", default=0, help="First frame to read")
@click.option("--num-frames", default=None, type=int, help="Number of frames (default: all)")
@click.option("--head", default=10, help="Number of samples to print")
@click.pass_obj
def get(
    config: DirscopeConfig,
    directory: Path,
    field: str,
    first_frame: int,
    num_frames: int | None,
    head: int,
) -> None:
    """Print a field's first samples and statistics."""
    from dirscope import DirfileError
    from dirscope.utils.schema import FieldStats

    dirfile = _open(directory, config.library_path)
    try:
        data = dirfile.get_data(field, first_frame=first_frame, num_frames=num_frames)
        frames = dirfile.frame_axis(field, first_frame=first_frame, num_frames=num_frames)
    except (DirfileError, ValueError) as e:
        console.print(f"[red]Error reading '{field}': {e}[/red]")
        raise SystemExit(1)
    finally:
        dirfile.close()

    table = Table(title=f"{field} ({len(data)} samples)")
    table.add_column("Frame", justify="right")
    table.add_column("Value", justify="right")
    for i in range(min(head, len(data))):
        frame = f"{frames[i]:.4f}" if i < len(frames) else ""
        table.add_row(frame, f"{data[i]:.6g}")
    if len(data) > head:
        table.add_row("...", f"({len(data) - head} more)")
    console.print(table)

    stat = FieldStats.from_array(field, data)
    console.print(
        f"min={stat.min:.4f}  max={stat.max:.4f}  "
        f"mean={stat.mean:.4f}  std={stat.std:.4f}"
    )


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--format", "-f", "fmt", type=click.Choice(["csv", "hdf5"]), default="csv",
              help="Export format")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Output directory or file")
@click.option("--field", "-c", multiple=True, help="Fields to export (default: all)")
@click.pass_obj
def export(
    config: DirscopeConfig,
    directory: Path,
    fmt: str,
    output: Path | None,
    field: tuple[str, ...],
) -> None:
    """Export a Dirfile to CSV or HDF5."""
    from dirscope import DirfileError

    _open(directory, config.library_path).close()
    selected = list(field) if field else None

    try:
        if fmt == "csv":
            from dirscope.export.csv import export_csv

            created = export_csv(directory, output_dir=output, fields=selected)
            for p in created:
                console.print(f"  Created: {p}")
            console.print(f"[green]Exported {len(created)} CSV file(s)[/green]")

        elif fmt == "hdf5":
            from dirscope.export.hdf5 import export_hdf5

            result = export_hdf5(directory, output=output, fields=selected)
            console.print(f"  Created: {result}")
            console.print("[green]HDF5 export complete[/green]")
    except DirfileError as e:
        console.print(f"[red]Export failed: {e}[/red]")
        raise SystemExit(1)


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--field", "-c", multiple=True, required=True, help="Fields to plot")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Save plot to file")
@click.pass_obj
def plot(config: DirscopeConfig, directory: Path, field: tuple[str, ...], output: Path | None) -> None:
    """Plot fields from a Dirfile."""
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        console.print("[red]matplotlib required. Install with: pip install dirscope[viz][/red]")
        raise SystemExit(1)

    from dirscope import DirfileError

    dirfile = _open(directory, config.library_path)
    try:
        for name in field:
            if name not in dirfile:
                console.print(f"[yellow]Warning: field '{name}' not found, skipping[/yellow]")
                continue
            fig = dirfile.plot(name)
            if output:
                suffix = output.suffix or ".png"
                out_path = output.with_name(f"{output.stem}_{name}{suffix}")
                fig.savefig(out_path, dpi=150, bbox_inches="tight")
                console.print(f"Saved: {out_path}")
            else:
                plt.show()
    except (DirfileError, ValueError) as e:
        console.print(f"[red]Error plotting '{name}': {e}[/red]")
        raise SystemExit(1)
    finally:
        dirfile.close()


if __name__ == "__main__":
    cli()
