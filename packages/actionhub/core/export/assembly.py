"""Archive assembly for a finished batch.

Runs once after every task has settled, so it is the only writer of the
archive. Two layouts are supported:

* canonical (naming enabled): outputs at their derived paths, a metadata
  sidecar per task and a top-level ``export_index.json``
* legacy (naming disabled): one flat entry per task named
  ``<asset>_<animation>.<ext>``, with frame output nested in an inner
  stored zip
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime
import logging
import posixpath
from typing import Any, NamedTuple

from actionhub.core.atlas.models import AtlasPage
from actionhub.core.export.archive import ZipArchiveWriter, zip_stored
from actionhub.core.export.errors import ArchiveAssemblyError
from actionhub.core.export.models import ExportConfig, FramesOutput, VideoOutput
from actionhub.core.export.outcome import TaskOutcome
from actionhub.core.export.protocols import ArchiveWriter
from actionhub.core.naming.sanitize import sanitize_path_segment
from actionhub.core.utils.json import dumps_json

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "export_index.json"
INDEX_VERSION = "1.0"


def sequence_frame_name(index: int, ext: str) -> str:
    return f"frame_{index:05d}.{ext}"


def legacy_entry_name(asset_name: str, animation: str, ext: str) -> str:
    return f"{sanitize_path_segment(f'{asset_name}_{animation}')}.{ext}"


class PathCollision(NamedTuple):
    """An outcome whose archive path was already claimed by an earlier one."""

    index: int
    path: str
    owner: TaskOutcome


def claimed_paths(outcome: TaskOutcome, naming_enabled: bool) -> tuple[str, ...]:
    """Archive paths that identify an outcome's entries in the given layout."""
    if outcome.result is None:
        return ()
    if naming_enabled:
        if outcome.paths is None:
            return ()
        return (outcome.paths.output_path, outcome.paths.metadata_path)
    output = outcome.result.output
    ext = output.ext if isinstance(output, VideoOutput) else "zip"
    return (legacy_entry_name(outcome.asset_name, outcome.animation, ext),)


def find_path_collisions(outcomes: Sequence[TaskOutcome], naming_enabled: bool) -> list[PathCollision]:
    """Find outcomes that would overwrite an earlier outcome's archive entries.

    Distinct animations can sanitize to the same name (``"Run 01"`` and
    ``"Run_01"``). The first outcome in task order keeps the path.
    """
    owners: dict[str, TaskOutcome] = {}
    collisions: list[PathCollision] = []
    for index, outcome in enumerate(outcomes):
        paths = claimed_paths(outcome, naming_enabled)
        taken = next((p for p in paths if p in owners), None)
        if taken is not None:
            collisions.append(PathCollision(index, taken, owners[taken]))
            continue
        owners.update(dict.fromkeys(paths, outcome))
    return collisions


def _page_entries(pages: Sequence[AtlasPage], directory: str = "") -> list[tuple[str, bytes | str]]:
    entries: list[tuple[str, bytes | str]] = []
    for page in pages:
        entries.append((posixpath.join(directory, page.image_file_name), page.image_bytes))
        entries.append((posixpath.join(directory, page.json_file_name), dumps_json(page.document)))
    return entries


def build_metadata_document(outcome: TaskOutcome, fps: int) -> dict[str, Any]:
    """Sidecar metadata written next to each canonical output.

    Raises:
        ArchiveAssemblyError: If the outcome has no resolved name or result
    """
    spec = outcome.spec
    paths = outcome.paths
    if spec is None or paths is None or outcome.result is None:
        raise ArchiveAssemblyError(f"Missing derived paths for '{outcome.label}'")
    return {
        "canonicalName": spec.canonical_name,
        "category": spec.category,
        "action": spec.action,
        "variant": spec.variant,
        "view": spec.view.value,
        "timing": spec.timing.value,
        "direction": spec.direction.value,
        "fps": fps,
        "frameCount": outcome.result.total_frames,
        "delivery": paths.delivery.value,
        "output": paths.output_path,
        "asset": {
            "id": outcome.asset_id,
            "name": outcome.asset_name,
            "key": outcome.asset_key,
            "animation": outcome.animation,
        },
    }


class ArchiveAssembler:
    """Writes successful task outputs into a single archive."""

    def __init__(
        self,
        config: ExportConfig,
        writer_factory: Callable[[], ArchiveWriter] = ZipArchiveWriter,
    ) -> None:
        self.config = config
        self._writer_factory = writer_factory

    def assemble(
        self,
        outcomes: Sequence[TaskOutcome],
        failures: Sequence[TaskOutcome] = (),
    ) -> bytes:
        """Build the archive from settled outcomes.

        Args:
            outcomes: Successful task outcomes, in task order
            failures: Failed outcomes, listed in the export index

        Returns:
            Archive bytes

        Raises:
            ArchiveAssemblyError: If any entry cannot be written or two
                outcomes claim the same archive path
        """
        collisions = find_path_collisions(outcomes, self.config.naming.enabled)
        if collisions:
            first = collisions[0]
            raise ArchiveAssemblyError(
                f"'{outcomes[first.index].label}' would overwrite '{first.path}' from '{first.owner.label}'"
            )

        writer = self._writer_factory()
        try:
            if self.config.naming.enabled:
                self._write_canonical(writer, outcomes, failures)
            else:
                self._write_legacy(writer, outcomes)
            return writer.build()
        except ArchiveAssemblyError:
            raise
        except Exception as e:
            raise ArchiveAssemblyError(f"Failed to assemble archive: {e}") from e

    def _write_canonical(
        self,
        writer: ArchiveWriter,
        outcomes: Sequence[TaskOutcome],
        failures: Sequence[TaskOutcome],
    ) -> None:
        records: list[dict[str, Any]] = []
        for outcome in outcomes:
            paths = outcome.paths
            if paths is None or outcome.result is None or outcome.spec is None:
                raise ArchiveAssemblyError(f"Missing derived paths for '{outcome.label}'")

            output = outcome.result.output
            if isinstance(output, VideoOutput):
                writer.add(paths.output_path, output.data)
            elif outcome.pages:
                directory = posixpath.dirname(paths.output_path)
                for name, data in _page_entries(outcome.pages, directory):
                    writer.add(name, data)
            elif isinstance(output, FramesOutput):
                for index, frame in enumerate(output.frames):
                    writer.add(f"{paths.output_path}/{sequence_frame_name(index, output.image_ext)}", frame)

            writer.add(paths.metadata_path, dumps_json(build_metadata_document(outcome, self.config.fps)))
            records.append(
                {
                    "asset_id": outcome.asset_id,
                    "asset": outcome.asset_name,
                    "animation": outcome.animation,
                    "delivery": paths.delivery.value,
                    "view": paths.view.value,
                    "canonical_name": paths.canonical_name,
                    "output_path": paths.output_path,
                    "metadata_path": paths.metadata_path,
                    "fps": self.config.fps,
                    "frame_count": outcome.result.total_frames,
                }
            )

        index = {
            "version": INDEX_VERSION,
            "generated_at": datetime.now(UTC).isoformat(),
            "fps": self.config.fps,
            "tasks": records,
            "failures": [
                {"asset_id": f.asset_id, "asset": f.asset_name, "animation": f.animation, "error": f.error}
                for f in failures
            ],
        }
        writer.add(INDEX_FILE_NAME, dumps_json(index))
        logger.debug(f"Wrote {len(records)} canonical task(s) and {INDEX_FILE_NAME}")

    def _write_legacy(self, writer: ArchiveWriter, outcomes: Sequence[TaskOutcome]) -> None:
        for outcome in outcomes:
            if outcome.result is None:
                continue
            output = outcome.result.output
            if isinstance(output, VideoOutput):
                writer.add(legacy_entry_name(outcome.asset_name, outcome.animation, output.ext), output.data)
                continue

            if outcome.pages:
                inner = zip_stored(_page_entries(outcome.pages))
            else:
                inner = zip_stored(
                    (sequence_frame_name(i, output.image_ext), frame)
                    for i, frame in enumerate(output.frames)
                )
            writer.add(legacy_entry_name(outcome.asset_name, outcome.animation, "zip"), inner)
        logger.debug(f"Wrote {len(outcomes)} legacy entr{'y' if len(outcomes) == 1 else 'ies'}")
