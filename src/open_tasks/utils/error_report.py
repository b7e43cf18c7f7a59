"""Error report files written next to a task's outputs."""

import json
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..workflow.decorators import format_timestamp


def write_error_report(
    output_dir: Union[str, Path],
    error: BaseException,
    context: Optional[Dict[str, Any]] = None,
) -> Path:
    """Write ``{timestamp}-error.txt`` into ``output_dir`` and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    now = datetime.now(timezone.utc)
    report_path = output_dir / f"{format_timestamp(now)}-error.txt"
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    lines = [
        "ERROR REPORT",
        "=" * 40,
        f"Timestamp: {now.isoformat()}",
        f"Error: {type(error).__name__}: {error}",
        "",
        "Traceback:",
        trace.rstrip(),
        "",
        "Context:",
        json.dumps(context or {}, indent=2, ensure_ascii=False, default=str),
        "",
    ]
    report_path.write_text("\n".join(lines), encoding="utf-8")
    return report_path
