"""
Storage manager for PMFlow.

Handles loading and saving of all JSON files in the .pmflow/ directory.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from pmflow.constants import DEFAULT_PMFLOW_DIR
from pmflow.exceptions import StorageError
from pmflow.logs import get_logger
from pmflow.models.files import ConfigFile, PhasesFile, WBSFile

logger = get_logger("storage")


class StorageManager:
    """
    Manages persistence of project data to JSON files in the .pmflow/ directory.

    Each file is rewritten whole and atomically, so the last save wins.
    """

    def __init__(self, pmflow_dir: Optional[Path] = None) -> None:
        """
        Initialize the StorageManager with a .pmflow/ directory path.

        Args:
            pmflow_dir: Path to the .pmflow/ directory. Defaults to .pmflow/ in current directory.
        """
        self.pmflow_dir = pmflow_dir if pmflow_dir else Path(DEFAULT_PMFLOW_DIR)
        self._ensure_pmflow_dir()

    def _ensure_pmflow_dir(self) -> None:
        """Create the .pmflow/ directory if it doesn't exist."""
        self.pmflow_dir.mkdir(parents=True, exist_ok=True)

    def _atomic_write(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Args:
            file_path: Path to the file to write.
            data: Dictionary data to write as JSON.

        Raises:
            StorageError: If writing to file fails.
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.pmflow_dir, prefix=".tmp_pmflow_", suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w") as temp_file:
                json.dump(data, temp_file, indent=2)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")
        logger.debug("Wrote %s", file_path)

    def _load(self, file_name: str, model):
        file_path = self.pmflow_dir / file_name
        if not file_path.exists():
            return model()

        try:
            with open(file_path, "r") as f:
                data = json.load(f)
            return model.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load {file_name}: {e}")

    # =========================================================================
    # WBS File
    # =========================================================================

    def load_wbs(self) -> WBSFile:
        """Load wbs.json and return as WBSFile model."""
        return self._load("wbs.json", WBSFile)

    def save_wbs(self, data: WBSFile) -> None:
        """Save WBSFile model to wbs.json."""
        self._atomic_write(self.pmflow_dir / "wbs.json", data.model_dump(mode="json"))

    # =========================================================================
    # Phases File
    # =========================================================================

    def load_phases(self) -> PhasesFile:
        """Load phases.json and return as PhasesFile model."""
        return self._load("phases.json", PhasesFile)

    def save_phases(self, data: PhasesFile) -> None:
        """Save PhasesFile model to phases.json."""
        self._atomic_write(self.pmflow_dir / "phases.json", data.model_dump(mode="json"))

    # =========================================================================
    # Config File
    # =========================================================================

    def load_config(self) -> ConfigFile:
        """Load config.json and return as ConfigFile model."""
        return self._load("config.json", ConfigFile)

    def save_config(self, data: ConfigFile) -> None:
        """Save ConfigFile model to config.json."""
        self._atomic_write(self.pmflow_dir / "config.json", data.model_dump(mode="json"))
