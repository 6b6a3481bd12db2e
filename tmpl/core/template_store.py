"""Installed template storage and registry downloads."""
import shutil
from pathlib import Path
from typing import List, Optional

import requests
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TimeRemainingColumn

from tmpl.core.config import DEFAULT_REGISTRY_URL, TmplConfig
from tmpl.core.logger import get_logger
from tmpl.core.retry import retry
from tmpl.engine.errors import TmplError

logger = get_logger(__name__)

TEMPLATE_FILE = "file.tmpl"
TEMPLATE_SUFFIX = ".tmpl"


class TemplateStoreError(TmplError):
    """Raised when a template cannot be installed, read or removed."""
    pass


class TemplateNotFoundError(TemplateStoreError):
    """Raised when a named template is not installed."""
    pass


def validate_name(name: str) -> str:
    """Return the trimmed template name or raise ``TemplateStoreError``."""
    name = (name or "").strip()
    if not name:
        raise TemplateStoreError("Template name cannot be empty")
    if " " in name:
        raise TemplateStoreError("Template name cannot contain spaces")
    if "/" in name or "\\" in name or name in (".", ".."):
        raise TemplateStoreError(f"Invalid template name '{name}'")
    return name


def read_template_file(path: Path, label: str) -> str:
    """Read template text as UTF-8, keeping line endings as written.

    Raises:
        TemplateStoreError: If the file is not valid UTF-8
    """
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise TemplateStoreError(f"Template '{label}' is not valid UTF-8: {e}") from e


def find_local_templates(directory: Path) -> List[Path]:
    """List ``*.tmpl`` files in ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == TEMPLATE_SUFFIX)


class TemplateStore:
    """Installs, lists, reads and removes templates under a data directory.

    Each template lives at ``<templates_dir>/<name>/file.tmpl``.
    """

    def __init__(
        self,
        templates_dir: Path,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: int = 30,
        attempts: int = 3,
    ):
        self.templates_dir = Path(templates_dir)
        self.registry_url = registry_url
        self.timeout = timeout
        self.attempts = attempts

    @classmethod
    def from_config(cls, config: TmplConfig) -> "TemplateStore":
        return cls(
            config.templates_dir,
            registry_url=config.registry_url,
            timeout=config.download_timeout,
            attempts=config.download_attempts,
        )

    def template_path(self, name: str) -> Path:
        return self.templates_dir / validate_name(name) / TEMPLATE_FILE

    def exists(self, name: str) -> bool:
        return self.template_path(name).is_file()

    def read(self, name: str) -> str:
        """Return the text of an installed template.

        Raises:
            TemplateNotFoundError: If the template is not installed
        """
        path = self.template_path(name)
        if not path.is_file():
            raise TemplateNotFoundError(
                f"Template '{name}' is not installed. Run `tmpl install {name}` first."
            )
        return read_template_file(path, name)

    def list_templates(self) -> List[str]:
        """List installed template names, sorted."""
        if not self.templates_dir.exists():
            return []
        return sorted(
            entry.name
            for entry in self.templates_dir.iterdir()
            if entry.is_dir() and (entry / TEMPLATE_FILE).is_file()
        )

    def remove(self, name: str) -> None:
        target = self.templates_dir / validate_name(name)
        if not target.exists():
            raise TemplateNotFoundError(f"Template '{name}' does not exist")
        shutil.rmtree(target)
        logger.debug(f"Removed template directory {target}")

    def import_file(self, source: Path, name: str) -> Path:
        """Copy a local template file into the store under ``name``."""
        source = Path(source)
        if not source.is_file():
            raise TemplateNotFoundError(f"Template file '{source}' does not exist")

        dest = self.template_path(name)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        logger.debug(f"Imported {source} as {dest}")
        return dest

    def install(self, name: str, progress: Optional[Progress] = None) -> Path:
        """Download a template from the registry and store it.

        Args:
            name: Template name
            progress: Rich progress display to report bytes on (optional)

        Returns:
            Path of the stored template file

        Raises:
            TemplateStoreError: If the registry does not serve the template
        """
        name = validate_name(name)
        url = self.registry_url.format(name=name)
        dest = self.template_path(name)
        created = not dest.parent.exists()
        dest.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._download(url, dest, progress)
        except requests.RequestException as e:
            self._discard(dest, created)
            raise TemplateStoreError(f"Failed to download template '{name}': {e}") from e
        except TemplateStoreError:
            self._discard(dest, created)
            raise
        return dest

    @staticmethod
    def _discard(dest: Path, created: bool) -> None:
        dest.with_suffix(".part").unlink(missing_ok=True)
        if created:
            shutil.rmtree(dest.parent, ignore_errors=True)

    @retry(
        max_attempts=lambda self: self.attempts,
        exceptions=(requests.ConnectionError, requests.Timeout),
    )
    def _download(self, url: str, dest: Path, progress: Optional[Progress] = None) -> None:
        logger.debug(f"Downloading template from: {url}")

        with requests.get(url, stream=True, timeout=self.timeout) as response:
            if not response.ok:
                raise TemplateStoreError(
                    f"Failed to download template from {url} (HTTP {response.status_code})"
                )

            total = int(response.headers.get("content-length") or 0) or None
            task = progress.add_task("download", filename=dest.parent.name, total=total) if progress else None

            partial = dest.with_suffix(".part")
            with open(partial, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if not chunk:
                        continue
                    f.write(chunk)
                    if progress is not None:
                        progress.update(task, advance=len(chunk))
            partial.replace(dest)


def download_progress(console=None) -> Progress:
    """Byte progress bar used for registry downloads."""
    return Progress(
        TextColumn("[bold blue]{task.fields[filename]}"),
        BarColumn(),
        DownloadColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    )
