# nodian/cli.py

from datetime import timezone
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from .services.logging import setup_logging
from .config.loader import get_config, save_config
from .config.paths import get_user_config_file
from .core.codecs import Encoding, encode, decode
from .core.documents import DocumentRegistry
from .core.errors import DecodeError, DocumentIOError, ParseError
from .core.hashing import HashAlgorithm, hash_text
from .core.json_format import format_json
from .core.markdown_preview import MarkdownRenderer
from .core.models import FileNode
from .core.notebook import Notebook
from .core.timestamps import DateTimePicker, TimeUnit, days_in_month, to_date, to_epoch
from . import __version__

# --- Typer Apps ---
app = typer.Typer(help="Nodian - Markdown notebook, JSON formatter, timestamp converter and hash/encoding tool.")
ts_app = typer.Typer(help="Convert between epoch timestamps and date-time strings.")
notes_app = typer.Typer(help="Manage the Markdown notebook.")
config_app = typer.Typer(help="Inspect or initialise the configuration file.")
app.add_typer(ts_app, name="ts")
app.add_typer(notes_app, name="notes")
app.add_typer(config_app, name="config")

def version_callback(value: bool):
    if value:
        print(f"Nodian Version: {__version__}")
        raise typer.Exit()

@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """ Main callback to set up logging """
    setup_logging(level="WARNING", verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose


def _fail(error: Exception):
    """Reports a handled error the way the tools show it, then exits with status 1."""
    logger.debug(f"Command failed: {error!r}")
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)

def _read_text(text: str) -> str:
    # '-' reads the whole of standard input
    if text == "-":
        return typer.get_text_stream("stdin").read()
    return text


# --- Hash / Encode ---

@app.command("hash")
def hash_cmd(
    text: str = typer.Argument(..., help="Text to hash, or '-' for stdin."),
    algorithm: Optional[HashAlgorithm] = typer.Option(None, "--algorithm", "-a", case_sensitive=False, help="Hash function (default from config)."),
):
    """Print the hex digest of TEXT."""
    algorithm = algorithm or get_config().default_hash_algorithm
    typer.echo(hash_text(algorithm, _read_text(text)))

@app.command("algorithms")
def algorithms_cmd():
    """List the supported hash functions."""
    for algorithm in HashAlgorithm:
        typer.echo(algorithm.value)

@app.command("encode")
def encode_cmd(
    text: str = typer.Argument(..., help="Text to encode, or '-' for stdin."),
    encoding: Optional[Encoding] = typer.Option(None, "--encoding", "-e", case_sensitive=False, help="Codec (default from config)."),
):
    """Encode TEXT with Base32, Base64, HTML or URL escaping."""
    encoding = encoding or get_config().default_encoding
    typer.echo(encode(encoding, _read_text(text)))

@app.command("decode")
def decode_cmd(
    text: str = typer.Argument(..., help="Text to decode, or '-' for stdin."),
    encoding: Optional[Encoding] = typer.Option(None, "--encoding", "-e", case_sensitive=False, help="Codec (default from config)."),
):
    """Decode TEXT with Base32, Base64, HTML or URL unescaping."""
    encoding = encoding or get_config().default_encoding
    try:
        typer.echo(decode(encoding, _read_text(text)))
    except DecodeError as e:
        _fail(e)


# --- JSON ---

@app.command("json")
def json_cmd(
    text: Optional[str] = typer.Argument(None, help="JSON text, or '-' for stdin."),
    file: Optional[Path] = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, readable=True, help="Read JSON from a file."),
    compact: bool = typer.Option(False, "--compact", "-c", help="Compact instead of pretty output."),
):
    """Pretty-print or compact JSON."""
    if file is not None:
        try:
            source = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            _fail(DocumentIOError(f"Could not read {file}: {e}"))
    elif text is not None:
        source = _read_text(text)
    else:
        source = _read_text("-")
    try:
        typer.echo(format_json(source, compact=compact, indent=get_config().json_indent))
    except ParseError as e:
        _fail(e)


# --- Timestamps ---

def _zone(utc: bool):
    return timezone.utc if utc else None

@ts_app.command("to-date")
def ts_to_date(
    epoch: str = typer.Argument(..., help="Epoch value."),
    unit: Optional[TimeUnit] = typer.Option(None, "--unit", "-u", case_sensitive=False, help="seconds or milliseconds."),
    utc: bool = typer.Option(False, "--utc", help="Use UTC instead of local time."),
):
    """Convert an epoch timestamp to YYYY-MM-DD HH:MM:SS."""
    unit = unit or get_config().default_time_unit
    try:
        typer.echo(to_date(epoch, unit, tz=_zone(utc)))
    except ParseError as e:
        _fail(e)

@ts_app.command("to-epoch")
def ts_to_epoch(
    datetime_text: str = typer.Argument(..., metavar="DATETIME", help="Date-time as 'YYYY-MM-DD HH:MM:SS'."),
    unit: Optional[TimeUnit] = typer.Option(None, "--unit", "-u", case_sensitive=False, help="seconds or milliseconds."),
    utc: bool = typer.Option(False, "--utc", help="Interpret the date-time as UTC instead of local time."),
):
    """Convert YYYY-MM-DD HH:MM:SS to an epoch timestamp."""
    unit = unit or get_config().default_time_unit
    try:
        typer.echo(str(to_epoch(datetime_text, unit, tz=_zone(utc))))
    except ParseError as e:
        _fail(e)

@ts_app.command("days")
def ts_days(year: int, month: int):
    """Print the number of days in MONTH of YEAR."""
    try:
        typer.echo(str(days_in_month(year, month)))
    except ValueError as e:
        _fail(e)

@ts_app.command("pick")
def ts_pick(
    start: Optional[str] = typer.Option(None, "--from", help="Seed date-time; defaults to now."),
    year: Optional[int] = typer.Option(None, "--year"),
    month: Optional[str] = typer.Option(None, "--month", help="Month number or English name."),
    day: Optional[int] = typer.Option(None, "--day"),
    hour: Optional[int] = typer.Option(None, "--hour"),
    minute: Optional[int] = typer.Option(None, "--minute"),
    second: Optional[int] = typer.Option(None, "--second"),
):
    """Compose a date-time the way the cascading picker does (day clamps to month length)."""
    try:
        picker = DateTimePicker.from_string(start or "", year_span=get_config().year_span)
        if year is not None: picker.select_year(year)
        if month is not None: picker.select_month(month)
        if day is not None: picker.select_day(day)
        if hour is not None: picker.select_hour(hour)
        if minute is not None: picker.select_minute(minute)
        if second is not None: picker.select_second(second)
    except ValueError as e:
        _fail(e)
    typer.echo(picker.formatted())


# --- Notebook ---

@notes_app.callback()
def notes_options(
    ctx: typer.Context,
    base_dir: Optional[Path] = typer.Option(None, "--base-dir", "-d", file_okay=False, help="Directory holding the notebook folder."),
):
    """ Builds the notebook for the notes commands """
    config = get_config()
    registry = DocumentRegistry(renderer=MarkdownRenderer(config.markdown_extensions))
    notebook = Notebook(base_dir or config.notebook_base_dir, config.notebook_folder,
                        ignore_patterns=config.ignore_patterns, registry=registry)
    try:
        notebook.ensure_root()
    except DocumentIOError as e:
        _fail(e)
    ctx.ensure_object(dict)
    ctx.obj["NOTEBOOK"] = notebook

def _notebook(ctx: typer.Context) -> Notebook:
    return ctx.obj["NOTEBOOK"]

def _print_tree(node: FileNode, depth: int = 0):
    for child in node.children:
        typer.echo(f"{'  ' * depth}{child.name}{'/' if child.is_dir else ''}")
        if child.is_dir:
            _print_tree(child, depth + 1)

@notes_app.command("ls")
def notes_ls(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Folder inside the notebook."),
    tree: bool = typer.Option(False, "--tree", "-t", help="Show the whole tree below PATH."),
):
    """List notes and folders, folders first."""
    notebook = _notebook(ctx)
    try:
        if tree:
            root = notebook.tree(error_callback=lambda msg: typer.echo(f"Warning: {msg}", err=True))
            target = notebook.resolve(path)
            stack = [root]
            while stack:
                node = stack.pop()
                if node.path == target:
                    _print_tree(node)
                    return
                stack.extend(c for c in node.children if c.is_dir)
            raise DocumentIOError(f"Not a folder in the notebook: {path}")
        for node in notebook.list(path):
            typer.echo(f"{node.name}{'/' if node.is_dir else ''}")
    except DocumentIOError as e:
        _fail(e)

@notes_app.command("new")
def notes_new(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the note or folder."),
    folder: bool = typer.Option(False, "--folder", help="Create a folder instead of a note."),
    parent: str = typer.Option("", "--parent", "-p", help="Folder (or sibling note) to create it in."),
):
    """Create a note ('.md' is appended) or a folder."""
    notebook = _notebook(ctx)
    try:
        if folder:
            created = notebook.create_folder(name, parent)
        else:
            created = notebook.create_file(name, parent).path
    except DocumentIOError as e:
        _fail(e)
    typer.echo(notebook.relative(created))

@notes_app.command("show")
def notes_show(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Note inside the notebook."),
    html: bool = typer.Option(False, "--html", help="Print the rendered preview instead of the source."),
):
    """Print a note, or its rendered HTML preview."""
    notebook = _notebook(ctx)
    try:
        session = notebook.open(path)
    except DocumentIOError as e:
        _fail(e)
    typer.echo(session.preview if html else session.text, nl=False)
    notebook.close(path)

@notes_app.command("write")
def notes_write(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Existing note inside the notebook."),
    text: Optional[str] = typer.Option(None, "--text", help="New content; read from stdin when omitted."),
    append: bool = typer.Option(False, "--append", "-a", help="Append to the current content."),
):
    """Replace (or append to) a note's content and save it."""
    notebook = _notebook(ctx)
    content = text if text is not None else _read_text("-")
    try:
        session = notebook.open(path)
        notebook.edit(path, session.text + content if append else content)
        notebook.save(path)
        notebook.close(path)
    except DocumentIOError as e:
        _fail(e)
    typer.echo(f"Saved {notebook.relative(notebook.resolve(path))}")

@notes_app.command("rename")
def notes_rename(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Note or folder inside the notebook."),
    new_name: str = typer.Argument(..., help="New name (no directory part)."),
):
    """Rename a note or folder in place."""
    notebook = _notebook(ctx)
    try:
        target = notebook.rename(path, new_name)
    except DocumentIOError as e:
        _fail(e)
    typer.echo(notebook.relative(target))

@notes_app.command("rm")
def notes_rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Note or folder inside the notebook."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """Delete a note, or a folder with everything in it."""
    notebook = _notebook(ctx)
    if get_config().confirm_delete and not yes:
        typer.confirm(f"Are you sure you want to delete '{path}'?", abort=True)
    try:
        notebook.delete(path)
    except DocumentIOError as e:
        _fail(e)
    typer.echo(f"Deleted {path}")


# --- Config ---

@config_app.command("show")
def config_show():
    """Print the effective configuration."""
    typer.echo(get_config().model_dump_json(indent=4))

@config_app.command("init")
def config_init(force: bool = typer.Option(False, "--force", help="Overwrite an existing file.")):
    """Write the current configuration to the user config file."""
    config_path = get_user_config_file()
    if config_path.exists() and not force:
        typer.echo(f"Config already exists: {config_path}")
        raise typer.Exit(code=1)
    try:
        save_config(get_config())
    except OSError as e:
        _fail(e)
    typer.echo(str(config_path))


if __name__ == "__main__":
    app()
