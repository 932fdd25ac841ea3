"""SiteWriter: stages output files and publishes them in one swap."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path

from blogsmith.site.models import AssemblyError

logger = logging.getLogger(__name__)


class SiteWriter:
    """Writes a site into a staging directory beside ``dest``.

    Nothing under ``dest`` changes until :meth:`commit`. Leaving the
    ``with`` block without committing removes the staging directory, so a
    failed run leaves any previous site exactly as it was.
    """

    def __init__(self, dest: str | Path) -> None:
        self.dest = Path(dest).resolve()
        self.staging: Path | None = None
        self._committed = False

    def __enter__(self) -> SiteWriter:
        if self.dest.exists() and not self.dest.is_dir():
            raise AssemblyError(f"Output path is not a directory: {self.dest}", path=str(self.dest))
        try:
            self.dest.parent.mkdir(parents=True, exist_ok=True)
            self.staging = Path(
                tempfile.mkdtemp(prefix=f".{self.dest.name}.staging-", dir=self.dest.parent)
            )
        except OSError as exc:
            raise AssemblyError(f"Cannot create staging directory: {exc}", path=str(self.dest)) from exc
        logger.debug("staging site in %s", self.staging)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.discard()

    # -- writing -------------------------------------------------------------

    def _target(self, rel: str) -> Path:
        if self.staging is None:
            raise RuntimeError("SiteWriter used outside of a with block")
        target = (self.staging / rel).resolve()
        if not target.is_relative_to(self.staging.resolve()):
            raise AssemblyError(f"Output path escapes the site directory: {rel}", path=rel)
        return target

    def write(self, rel: str, content: str) -> Path:
        """Write a document at ``rel`` inside the staged site."""
        target = self._target(rel)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise AssemblyError(f"Failed to write {rel}: {exc}", path=rel) from exc
        logger.debug("wrote %s (%d bytes)", rel, len(content))
        return target

    def copy(self, source: Path, rel: str) -> Path:
        """Copy a static file to ``rel`` inside the staged site."""
        target = self._target(rel)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
        except OSError as exc:
            raise AssemblyError(f"Failed to copy {source}: {exc}", path=rel) from exc
        return target

    def exists(self, rel: str) -> bool:
        return self._target(rel).exists()

    # -- publishing ----------------------------------------------------------

    def commit(self) -> Path:
        """Swap the staged site into place and return the destination."""
        if self.staging is None:
            raise RuntimeError("nothing staged")

        backup: Path | None = None
        try:
            if self.dest.exists():
                backup = self.dest.with_name(f".{self.dest.name}.old-{uuid.uuid4().hex[:8]}")
                os.replace(self.dest, backup)
            try:
                os.replace(self.staging, self.dest)
            except OSError:
                if backup is not None:
                    os.replace(backup, self.dest)
                    backup = None
                raise
        except OSError as exc:
            raise AssemblyError(f"Failed to publish site to {self.dest}: {exc}", path=str(self.dest)) from exc

        self._committed = True
        self.staging = None
        if backup is not None:
            shutil.rmtree(backup, ignore_errors=True)
        logger.info("published site to %s", self.dest)
        return self.dest

    def discard(self) -> None:
        if self.staging is not None and self.staging.exists():
            shutil.rmtree(self.staging, ignore_errors=True)
            logger.debug("discarded staging directory %s", self.staging)
        self.staging = None
