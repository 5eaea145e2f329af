"""
Batch generation.

Builds every fastener of a ``BatchConfig`` in order and writes the
requested files. Each item yields a ``BuildOutcome``; an invalid or failing
item is recorded and the batch moves on to the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import BatchConfig, FastenerConfig, OutputSettings
from .errors import BoltgenError
from .export import export_fastener
from .fasteners.bolt import Fastener, make_bolt
from .fasteners.nut import make_nut
from .fasteners.parameters import BoltParameters

logger = logging.getLogger(__name__)


@dataclass
class BuildOutcome:
    """
    Result of building one batch item.

    Attributes:
        label: Item name used in reports
        fasteners: Generated bolt and, if requested, nut
        files: Files written
        error: The validation or construction error, None on success
    """

    label: str
    fasteners: list[Fastener] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def diagnostics(self) -> list[str]:
        return [f"{f.name}: {note}" for f in self.fasteners for note in f.diagnostics]


def build_fasteners(params: BoltParameters) -> list[Fastener]:
    """Build the bolt, followed by its nut when ``params.nut.generate`` is set."""
    fasteners = [make_bolt(params)]
    if params.nut.generate:
        fasteners.append(make_nut(params))
    return fasteners


def run_item(item: FastenerConfig, settings: OutputSettings, output_dir: str | Path | None = None) -> BuildOutcome:
    """Build and export one batch item, capturing validation and construction errors."""
    outcome = BuildOutcome(item.label)
    target = Path(output_dir) if output_dir is not None else Path(settings.output_dir)
    try:
        params = item.to_parameters()
        outcome.label = params.name
        outcome.fasteners = build_fasteners(params)
        for fastener in outcome.fasteners:
            outcome.files.extend(
                export_fastener(fastener, target, settings.formats, settings.unit, settings.stl_quality)
            )
    except (BoltgenError, ValueError) as e:
        logger.error("%s: %s", outcome.label, e)
        outcome.error = e
    return outcome


def run_batch(config: BatchConfig, output_dir: str | Path | None = None) -> list[BuildOutcome]:
    """
    Build every fastener in a batch configuration.

    Args:
        config: Loaded batch configuration
        output_dir: Overrides ``config.settings.output_dir`` when given

    Returns:
        One outcome per configured fastener, in order
    """
    outcomes = []
    for i, item in enumerate(config.fasteners, 1):
        logger.info("Batch item %d/%d: %s", i, len(config.fasteners), item.label)
        outcomes.append(run_item(item, config.settings, output_dir))

    failed = sum(1 for o in outcomes if not o.ok)
    logger.info("Batch complete: %d built, %d failed", len(outcomes) - failed, failed)
    return outcomes
