"""Generated artifacts, the generator base class, and the file writer.

Generators return ``GeneratedArtifact`` values and never touch the
filesystem; :class:`ArtifactWriter` is the only component that writes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from totigen.config import GenerationOptions
from totigen.schema.models import CollectionSchema

from .templates import TemplateRenderer

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class GeneratedArtifact(BaseModel):
    """A generated file: project-relative POSIX path plus content."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Path relative to the project root")
    content: str = Field(default="", description="File content")


class ArtifactWriteError(Exception):
    """Raised when an artifact cannot be written to disk."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        super().__init__(f"{path}: {message}")


def normalize_content(content: str) -> str:
    """Strip surrounding whitespace and end with exactly one newline."""
    return content.strip() + "\n"


# ---------------------------------------------------------------------------
# Generator base
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """Base for the per-artifact generators.

    Subclasses override ``shared`` for artifacts emitted once per run and
    ``for_collection`` for artifacts emitted per collection.  The pipeline
    calls the two hooks separately so it can name the failing collection.
    """

    stage: str = "generate"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def shared(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        return []

    def for_collection(
        self,
        schema: CollectionSchema,
        schemas: Sequence[CollectionSchema],
        options: GenerationOptions,
    ) -> list[GeneratedArtifact]:
        return []

    def generate(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        """Every artifact this generator produces, shared ones first."""
        artifacts = self.shared(schemas, options)
        for schema in schemas:
            artifacts.extend(self.for_collection(schema, schemas, options))
        return artifacts

    def _artifact(self, path: str, template: str, context: dict) -> GeneratedArtifact:
        return GeneratedArtifact(path=path, content=self.renderer.render(template, context))


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """Writes artifacts under a project root.

    Parent directories are created, existing files are overwritten, and
    content is normalized with :func:`normalize_content`.  Writes happen in
    order; when one fails, files written before it stay on disk.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def resolve(self, artifact: GeneratedArtifact) -> Path:
        relative = PurePosixPath(artifact.path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ArtifactWriteError(artifact.path, "path escapes the project root")
        return self.root.joinpath(*relative.parts)

    async def write(self, artifact: GeneratedArtifact) -> Path:
        target = self.resolve(artifact)
        try:
            await asyncio.to_thread(_write_file, target, normalize_content(artifact.content))
        except OSError as exc:
            raise ArtifactWriteError(artifact.path, str(exc)) from exc
        logger.debug("Wrote %s", target)
        return target

    async def write_all(self, artifacts: Iterable[GeneratedArtifact]) -> list[Path]:
        written: list[Path] = []
        for artifact in artifacts:
            written.append(await self.write(artifact))
        return written


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
