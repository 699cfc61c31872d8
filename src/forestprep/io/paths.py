"""Output directory and file path management."""

from pathlib import Path
from datetime import datetime
from typing import Optional

from ..config.settings import settings


def create_output_dir(name: str, timestamp: Optional[datetime] = None) -> Path:
    if timestamp is None:
        timestamp = datetime.now()
    dirname = f"{name}_{timestamp.strftime('%Y%m%d_%H%M%S')}"
    dirpath = settings.output_dir / dirname
    dirpath.mkdir(parents=True, exist_ok=True)
    return dirpath


def spec_output_path(input_path: Path, output_dir: Optional[Path] = None) -> Path:
    """Default JSON path for the spec built from ``input_path``."""
    if output_dir is None:
        output_dir = create_output_dir(input_path.stem.replace(" ", "_"))
    return output_dir / f"{input_path.stem}.forestplot.json"
