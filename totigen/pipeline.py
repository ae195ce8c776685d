"""totigen generation pipeline.

Runs the generation stages over one normalized schema:

Stage persistence -- Firebase bootstrap, shared support, per-collection actions.
Stage store       -- the aggregated Pinia store.
Stage validation  -- one validator module per collection.
Stage forms       -- create/edit views per collection.
Stage routes      -- router, guards, placeholder views.

All stages render in memory; the writer persists the result afterwards, so a
schema or template failure never leaves a half-generated tree.

Usage::

    python -m totigen.pipeline definition.json
    python -m totigen.pipeline definition.yaml --project ./my-app --dry-run
"""

from __future__ import annotations

import asyncio
import logging
import sys
import time
import warnings
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml
from pydantic import BaseModel, Field
from rich.panel import Panel

from totigen.config import Config, GenerationOptions
from totigen.generators import (
    ArtifactGenerator,
    ArtifactWriteError,
    ArtifactWriter,
    FormGenerator,
    GeneratedArtifact,
    PersistenceGenerator,
    RouteGenerator,
    StoreGenerator,
    TemplateRenderer,
    ValidationGenerator,
)
from totigen.schema.field_types import NamingDegeneracyWarning
from totigen.schema.models import CollectionSchema
from totigen.schema.normalizer import SchemaError, normalize
from totigen.utils import (
    configure_logging,
    console,
    find_project_root,
    format_duration,
    load_definition,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GenerationError(Exception):
    """Raised when a generation stage fails for a collection (or globally)."""

    def __init__(self, stage: str, collection: Optional[str], message: str) -> None:
        self.stage = stage
        self.collection = collection
        where = f"{stage}/{collection}" if collection else stage
        super().__init__(f"Stage {where}: {message}")


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class GenerationReport(BaseModel):
    """Outcome of one pipeline run."""
    collections: list[str] = Field(default_factory=list)
    artifacts: list[str] = Field(default_factory=list, description="Generated paths")
    written: list[str] = Field(default_factory=list, description="Paths written to disk")
    warnings: list[str] = Field(default_factory=list)
    dry_run: bool = False
    elapsed: float = 0.0


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Normalizes a definition, runs every generator and writes the result.

    Attributes:
        config: Run configuration (project root, dry run, default options).
        renderer: Shared Jinja2 renderer handed to every generator.
        generators: Stages in execution order.
    """

    def __init__(self, config: Config, renderer: Optional[TemplateRenderer] = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.generators: list[ArtifactGenerator] = [
            PersistenceGenerator(self.renderer),
            StoreGenerator(self.renderer),
            ValidationGenerator(self.renderer),
            FormGenerator(self.renderer),
            RouteGenerator(self.renderer),
        ]

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def resolve_options(self, definition: dict[str, Any]) -> GenerationOptions:
        """Options from the definition file win over the configured defaults."""
        answers = definition.get("options")
        if answers:
            return GenerationOptions.from_answers(answers)
        return self.config.options

    def load_schemas(
        self, raw_collections: Any, options: GenerationOptions
    ) -> tuple[tuple[CollectionSchema, ...], list[str]]:
        """Normalize the intake, collecting degeneracy warnings as messages."""
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", NamingDegeneracyWarning)
            schemas = normalize(raw_collections, identity_names=options.identity_collections)
        messages = [
            str(w.message) for w in caught if issubclass(w.category, NamingDegeneracyWarning)
        ]
        return schemas, messages

    def generate(
        self, schemas: Sequence[CollectionSchema], options: GenerationOptions
    ) -> list[GeneratedArtifact]:
        """Run every stage and return the artifacts in stage order.

        Raises:
            GenerationError: A stage failed, or two artifacts share a path.
        """
        artifacts: list[GeneratedArtifact] = []
        for generator in self.generators:
            try:
                artifacts.extend(generator.shared(schemas, options))
            except GenerationError:
                raise
            except Exception as exc:
                raise GenerationError(generator.stage, None, str(exc)) from exc
            for schema in schemas:
                try:
                    artifacts.extend(generator.for_collection(schema, schemas, options))
                except Exception as exc:
                    raise GenerationError(
                        generator.stage, schema.canonical_name, str(exc)
                    ) from exc

        seen: set[str] = set()
        for artifact in artifacts:
            if artifact.path in seen:
                raise GenerationError("assemble", None, f"Two artifacts target {artifact.path}")
            seen.add(artifact.path)
        return artifacts

    def build(
        self, definition: dict[str, Any]
    ) -> tuple[list[GeneratedArtifact], GenerationReport]:
        """Normalize *definition* and render every artifact (no I/O)."""
        options = self.resolve_options(definition)
        schemas, messages = self.load_schemas(definition.get("collections", []), options)
        for message in messages:
            logger.warning(message)
        artifacts = self.generate(schemas, options)
        report = GenerationReport(
            collections=[s.canonical_name for s in schemas],
            artifacts=[a.path for a in artifacts],
            warnings=messages,
            dry_run=self.config.dry_run,
        )
        return artifacts, report

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run(self, definition: dict[str, Any]) -> GenerationReport:
        """Build every artifact and, unless this is a dry run, write them.

        Raises:
            SchemaError: The definition is invalid (nothing is written).
            GenerationError: A stage failed (nothing is written).
            ArtifactWriteError: A write failed (earlier files remain).
        """
        start = time.monotonic()
        artifacts, report = self.build(definition)

        if not self.config.dry_run:
            if self.config.project_root is None:
                raise GenerationError("write", None, "No project root configured")
            writer = ArtifactWriter(self.config.project_root)
            written = await writer.write_all(artifacts)
            report.written = [str(path) for path in written]

        report.elapsed = time.monotonic() - start
        return report

    def print_report(self, report: GenerationReport) -> None:
        for message in report.warnings:
            print_warning(f"  {message}")
        print_summary_table(
            {
                "Collections": ", ".join(report.collections) or "(none)",
                "Artifacts": str(len(report.artifacts)),
                "Written": "dry run" if report.dry_run else str(len(report.written)),
                "Warnings": str(len(report.warnings)),
                "Duration": format_duration(report.elapsed),
            },
            title="Generation Summary",
        )
        if report.dry_run:
            for path in report.artifacts:
                console.print(f"  [dim]{path}[/dim]")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``python -m totigen.pipeline``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="totigen -- generate a Vue/Pinia/Firebase front end from collection schemas",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m totigen.pipeline definition.json\n"
            "  python -m totigen.pipeline definition.yaml --project ./my-app\n"
            "  python -m totigen.pipeline definition.json --dry-run\n"
        ),
    )
    parser.add_argument(
        "definition",
        nargs="?",
        default=None,
        help="Path to the JSON or YAML collection definition (default: $TOTIGEN_DEFINITION)",
    )
    parser.add_argument(
        "--project", "-p",
        default=None,
        help="Target project root (default: nearest ancestor with package.json, src/, .env.example)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render everything and list the paths without writing",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    config = Config.from_env()
    config = config.model_copy(
        update={
            "definition_path": Path(args.definition) if args.definition else config.definition_path,
            "dry_run": args.dry_run or config.dry_run,
            "verbose": args.verbose or config.verbose,
        }
    )
    configure_logging(config.verbose)

    if config.definition_path is None:
        print_error("No definition file given (pass a path or set TOTIGEN_DEFINITION)")
        sys.exit(1)
    if not config.definition_path.exists():
        print_error(f"Definition file not found: {config.definition_path}")
        sys.exit(1)

    project_root = Path(args.project) if args.project else config.project_root
    if project_root is None:
        project_root = find_project_root()
    if project_root is None and not config.dry_run:
        print_error(
            "No project root found (looked for package.json, src/ and .env.example). "
            "Pass --project or run inside the project."
        )
        sys.exit(1)
    config = config.model_copy(update={"project_root": project_root})

    console.print(
        Panel(
            f"[bold bright_cyan]totigen[/bold bright_cyan]\n"
            f"Definition : {config.definition_path}\n"
            f"Project    : {config.project_root or '(dry run)'}",
            title="[bold]Generate[/bold]",
            border_style="bright_cyan",
        )
    )

    pipeline = Pipeline(config)
    try:
        definition = load_definition(config.definition_path)
        report = asyncio.run(pipeline.run(definition))
    except (SchemaError, GenerationError, ArtifactWriteError, ValueError, yaml.YAMLError) as exc:
        print_error(f"Generation failed: {exc}")
        sys.exit(1)

    print_stage_header("Summary")
    pipeline.print_report(report)
    print_success("Generation complete.")


if __name__ == "__main__":
    main()
