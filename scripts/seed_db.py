from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeport_forms.timeport_forms.core.logging import configure_logging
from src.timeport_forms.timeport_forms.database.bootstrap import seed_default_templates


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    db_config = dict(settings.DB_CONFIG)

    created = seed_default_templates(db_config)
    print(
        "OK: Seeded form templates -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(created={', '.join(created) or 'none'})"
    )


if __name__ == "__main__":
    main()
