from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


def event_log_path() -> Path:
    return Path(os.getenv("MAP_EVENT_LOG_PATH", "map_events.log"))


def log_event(session_id: str, event: str, data: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Append one emitted command or screen event as a JSON line.
    """
    target = path or event_log_path()
    try:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event": event,
            "data": data,
        }
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
    except OSError:
        # Event logging never interrupts command delivery.
        return
