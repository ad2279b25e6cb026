from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import Any


def write_json(path: str | Path, payload: Any) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return target


def sync_directory(src: str | Path, dst: str | Path) -> bool:
    source = Path(src)
    if not source.is_dir():
        return False
    target = Path(dst)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, target, dirs_exist_ok=True)
    return True
