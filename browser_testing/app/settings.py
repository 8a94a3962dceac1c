# browser_testing/app/settings.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class DriverSettings:
    remote_url: Optional[str] = None
    client: Optional[str] = None
    capabilities: Optional[Dict[str, Any]] = None
    screenshot_dir: str = "screenshots"
    http_timeout: float = 60.0

    @classmethod
    def load(cls, path: Path) -> DriverSettings:
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except Exception:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls(
            remote_url=data.get("remote_url"),
            client=str(data["client"]).lower() if data.get("client") else None,
            capabilities=data.get("capabilities") if isinstance(data.get("capabilities"), dict) else None,
            screenshot_dir=str(data.get("screenshot_dir", cls.screenshot_dir)),
            http_timeout=float(data.get("http_timeout", cls.http_timeout)),
        )

    def save(self, path: Path) -> None:
        try:
            path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save driver settings to %s: %s", path, exc)
