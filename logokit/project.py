"""Host project files: component output directory and the logos.json tracking file."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .constants import PROJECT_CONFIG_FILES, PROJECT_DEPENDENCIES, TRACKING_FILENAME
from .exceptions import ProjectError, TrackingError
from .utils import utc_now

__all__ = ["ProjectFiles"]

logger = logging.getLogger(__name__)


class ProjectFiles:
    """Paths and writes inside the project rooted at *cwd*.

    Components land in ``src/components/logos/``; ``logos.json`` at the root
    records one entry per added component.
    """

    def __init__(self, cwd: Path) -> None:
        self.cwd = cwd
        self.logos_dir = cwd / "src" / "components" / "logos"
        self.tracking_file = cwd / TRACKING_FILENAME

    # ── Project detection ─────────────────────────────────────────────────────

    def _package_dependencies(self) -> set[str]:
        package_json = self.cwd / "package.json"
        if not package_json.is_file():
            return set()
        try:
            data = json.loads(package_json.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read %s: %s", package_json, exc)
            return set()
        deps: set[str] = set()
        for section in ("dependencies", "devDependencies"):
            value = data.get(section)
            if isinstance(value, dict):
                deps.update(value)
        return deps

    def is_supported_project(self) -> bool:
        """True for React, Solid or Vue projects (by dependency or config file)."""
        if self._package_dependencies() & PROJECT_DEPENDENCIES:
            return True
        return any((self.cwd / name).exists() for name in PROJECT_CONFIG_FILES)

    def detect_framework(self) -> str | None:
        """'vue' or 'react' from package.json, None when undecided."""
        deps = self._package_dependencies()
        if "vue" in deps:
            return "vue"
        if deps & {"react", "react-dom", "solid-js"}:
            return "react"
        return None

    # ── Component files ───────────────────────────────────────────────────────

    def component_path(self, name: str, extension: str) -> Path:
        return self.logos_dir / f"{name}.{extension}"

    def relative_component_file(self, name: str, extension: str) -> str:
        return f"components/logos/{name}.{extension}"

    def component_exists(self, name: str, extension: str) -> bool:
        return self.component_path(name, extension).exists()

    def ensure_directories(self) -> None:
        """Create ``src/components/logos`` in a supported project.

        Raises:
            ProjectError: If this is not a supported project or the directory cannot be created.
        """
        if not self.is_supported_project():
            raise ProjectError(f"{self.cwd} is not a React, SolidJS or Vue project directory")
        try:
            self.logos_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProjectError(f"Cannot create {self.logos_dir}: {exc}") from exc

    def write_component(self, name: str, content: str, extension: str) -> Path:
        """Write one generated component and return its path.

        Raises:
            ProjectError: If the directory cannot be prepared or the file written.
        """
        self.ensure_directories()
        path = self.component_path(name, extension)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ProjectError(f"Failed to write {path}: {exc}") from exc
        return path

    # ── Tracking ──────────────────────────────────────────────────────────────

    def load_tracking(self) -> dict:
        """Return the tracking data; an empty record when missing or unreadable."""
        if not self.tracking_file.exists():
            return {"logos": []}
        try:
            data = json.loads(self.tracking_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read tracking file %s: %s", self.tracking_file, exc)
            return {"logos": []}
        if not isinstance(data, dict) or not isinstance(data.get("logos"), list):
            logger.warning("Ignoring malformed tracking file %s", self.tracking_file)
            return {"logos": []}
        return data

    def save_tracking(self, tracking: dict) -> None:
        """Write the tracking data.

        Raises:
            TrackingError: If the file cannot be written.
        """
        try:
            self.tracking_file.write_text(json.dumps(tracking, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise TrackingError(f"Could not update {self.tracking_file}: {exc}") from exc

    def add_to_tracking(self, name: str, extension: str) -> dict:
        """Record *name* (replacing any previous entry) and return the new entry."""
        tracking = self.load_tracking()
        entry = {
            "name": name,
            "file": self.relative_component_file(name, extension),
            "createdAt": utc_now().isoformat(),
        }
        tracking["logos"] = [
            logo for logo in tracking["logos"] if not (isinstance(logo, dict) and logo.get("name") == name)
        ]
        tracking["logos"].append(entry)
        self.save_tracking(tracking)
        return entry

    def tracked_logos(self) -> list[dict]:
        return list(self.load_tracking()["logos"])
