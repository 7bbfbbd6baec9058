"""Batch workflows over files and directories.

Each image is processed in its own error boundary: a file that cannot be
decoded or processed is logged and recorded as failed, and the batch moves on.
Within one image, output is all-or-nothing: every variant is staged to a
``.part`` file first and moved into place only once all writes succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from .errors import LogoFitError
from .io_utils import ensure_dir, iter_image_paths, load_bitmap, save_processed
from .models import Bitmap, ProcessedImage

# Maps a decoded bitmap to named outputs for one image.
Processor = Callable[[Bitmap], Dict[str, ProcessedImage]]


@dataclass
class BatchReport:
    """Outcome of a batch run.

    Attributes
    ----------
    written
        Output files created. Existing outputs kept under ``overwrite=False``
        are not listed.
    skipped
        Inputs skipped because all their outputs already existed.
    failed
        (input path, error message) pairs.
    """

    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def output_path(output_dir: Path, src: Path, suffix: str) -> Path:
    """Destination for one variant: ``<output_dir>/<stem>_<suffix>.png``."""

    return Path(output_dir) / f"{src.stem}_{suffix}.png"


def _write_outputs(pending: List[Tuple[Path, ProcessedImage]]) -> None:
    """Stage every output next to its destination, then move them into place.

    If staging fails, staged files are removed and no destination is touched.
    """

    staged: List[Tuple[Path, Path]] = []
    try:
        for dest, processed in pending:
            part = dest.with_name(dest.name + ".part")
            save_processed(processed, part)
            staged.append((part, dest))
        for part, dest in staged:
            part.replace(dest)
    except OSError:
        for part, _ in staged:
            if part.exists():
                part.unlink()
        raise


def process_batch(
    input_path: Path,
    output_dir: Path,
    processor: Processor,
    expected_outputs: List[str],
    overwrite: bool = False,
    preprocess: Optional[Callable[[Bitmap], Bitmap]] = None,
) -> BatchReport:
    """Run ``processor`` over every image under ``input_path``.

    Parameters
    ----------
    input_path
        Path to a single image or a directory.
    output_dir
        Destination directory for processed images.
    processor
        Produces the named outputs for one decoded image.
    expected_outputs
        Output names the processor will produce; used for the overwrite check.
    overwrite
        Whether to overwrite existing files. When False, existing outputs are
        left untouched and only missing ones are written.
    preprocess
        Optional bitmap transform applied before ``processor`` (crop, keying).

    Returns
    -------
    BatchReport
        Files written, skipped and failed.
    """

    out_dir = Path(output_dir)
    ensure_dir(out_dir)
    report = BatchReport()

    for src in iter_image_paths(Path(input_path)):
        targets = [output_path(out_dir, src, name) for name in expected_outputs]
        if not overwrite and targets and all(t.exists() for t in targets):
            logger.warning(f"Skipping {src.name}: outputs exist (use --overwrite)")
            report.skipped.append(src)
            continue
        try:
            bitmap = load_bitmap(src)
            if preprocess is not None:
                bitmap = preprocess(bitmap)
            outputs = processor(bitmap)

            pending: List[Tuple[Path, ProcessedImage]] = []
            for name, processed in outputs.items():
                dest = output_path(out_dir, src, name)
                if dest.exists() and not overwrite:
                    logger.warning(f"Keeping existing {dest.name} (use --overwrite)")
                    continue
                pending.append((dest, processed))
            _write_outputs(pending)
        except (LogoFitError, OSError) as exc:
            logger.error(f"Failed to process {src}: {exc}")
            report.failed.append((src, str(exc)))
            continue

        for dest, processed in pending:
            logger.info(
                f"Wrote {processed.variant} {processed.fit.canvas_width}x"
                f"{processed.fit.canvas_height} -> {dest}"
            )
            report.written.append(dest)

    logger.info(
        f"Batch done: {len(report.written)} written, {len(report.skipped)} skipped, "
        f"{len(report.failed)} failed"
    )
    return report
