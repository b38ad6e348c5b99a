"""AppContext: shared Click context for all commands.

Created once by the root group and passed to subcommands with
``@click.pass_obj``. Collaborators (validation engine, cache backend,
pipeline) are built lazily on first use, so ``--help`` never touches
Redis.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from slanger.config.logging import configure_logging
from slanger.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from slanger.config.settings import SlangerSettings
    from slanger.services.cache import ResultCache
    from slanger.services.pipeline import GenerationPipeline
    from slanger.services.result import ServiceResult
    from slanger.validation.engine import ValidationEngine


class AppContext:
    """Settings plus lazily built collaborators for one CLI invocation."""

    def __init__(self, settings: SlangerSettings) -> None:
        self.settings = settings
        self._engine: ValidationEngine | None = None
        self._cache: ResultCache | None = None
        self._pipeline: GenerationPipeline | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from slanger.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def engine(self) -> ValidationEngine:
        if self._engine is None:
            from slanger.validation.engine import ValidationEngine

            config = self.settings.validation
            self._engine = ValidationEngine(
                paradigm_sample_size=config.paradigm_sample_size,
                minimum_vocabulary=config.minimum_vocabulary,
            )
        return self._engine

    @property
    def cache(self) -> ResultCache:
        if self._cache is None:
            from slanger.infrastructure.cache import create_cache_backend
            from slanger.services.cache import ResultCache

            config = self.settings.cache
            backend = create_cache_backend(
                config.redis_url, connect_timeout=config.connect_timeout
            )
            self._cache = ResultCache(
                backend, prefix=config.key_prefix, ttls=config.ttl_overrides
            )
        return self._cache

    @property
    def pipeline(self) -> GenerationPipeline:
        if self._pipeline is None:
            from slanger.services.pipeline import GenerationPipeline

            self._pipeline = GenerationPipeline(
                self.cache,
                validator=self.engine.validate,
                world_char_budget=self.settings.prune.world_char_budget,
            )
        return self._pipeline

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: output to stdout. Warnings go to stderr outside JSON
          mode so they don't pollute piped output.
        * Failure: output to stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
