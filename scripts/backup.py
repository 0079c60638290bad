"""Backup the engine state.

Note: the JSON backend is copied as-is; the MySQL backend uses `mysqldump`
(if installed). Otherwise back up with MySQL Workbench or phpMyAdmin.
"""

from __future__ import annotations

import importlib
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "STATE_BACKEND", "json")).lower()

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if backend == "json":
        source = Path(settings.STATE_FILE)
        if not source.exists():
            raise SystemExit(f"No state file at {source}")
        out_file = out_dir / f"bot-data_{ts}.json"
        shutil.copy2(source, out_file)
        print(f"OK: Backup created: {out_file}")
        return

    if backend != "mysql":
        raise SystemExit(f"Nothing to back up for STATE_BACKEND={backend}")

    db = settings.DB_CONFIG
    out_file = out_dir / f"wakeup_streak_{ts}.sql"
    cmd = [
        "mysqldump",
        f"-h{db['host']}",
        f"-P{db.get('port', 3306)}",
        f"-u{db['user']}",
        f"-p{db['password']}",
        db["database"],
    ]

    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
        print(f"OK: Backup created: {out_file}")
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools or back up with Workbench.")


if __name__ == "__main__":
    main()
