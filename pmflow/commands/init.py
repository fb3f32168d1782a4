from pathlib import Path

import click

from pmflow.constants import DEFAULT_PMFLOW_DIR, VALID_PROJECT_MODES
from pmflow.exceptions import StorageError
from pmflow.managers.storage_manager import StorageManager
from pmflow.models.files import ConfigFile


@click.command()
@click.option(
    "-m",
    "--mode",
    type=click.Choice(VALID_PROJECT_MODES),
    default="waterfall",
    show_default=True,
    help="Project mode; selects the base phase set.",
)
@click.option(
    "--dir",
    "pmflow_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_PMFLOW_DIR,
    help="Directory to store project data in.",
)
@click.option(
    "--force",
    is_flag=True,
    help="Force re-initialization, overwriting existing config.json.",
)
def init(mode, pmflow_dir, force):
    """Initializes a new PMFlow project."""
    config_file = pmflow_dir / "config.json"
    if config_file.exists() and not force:
        click.confirm(
            f"A project already exists at {pmflow_dir.resolve()}. Do you want to overwrite its config?",
            abort=True,
        )

    try:
        storage = StorageManager(pmflow_dir)
        storage.save_config(ConfigFile(project_mode=mode))
        click.echo(f"PMFlow project ({mode}) initialized at {pmflow_dir.resolve()}")
    except StorageError as e:
        raise click.ClickException(str(e))
