"""
Streamlit entrypoint.

    streamlit run dataverse_accounts/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    # `streamlit run dataverse_accounts/app.py` puts the package directory, not the repo root, on sys.path.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_s = str(repo_root)
    if repo_root_s not in sys.path:
        sys.path.insert(0, repo_root_s)


_ensure_repo_root_on_path()

from dataverse_accounts.config import get_settings  # noqa: E402
from dataverse_accounts.logging_config import configure_logging  # noqa: E402
from dataverse_accounts.ui.app import main  # noqa: E402

if __name__ == "__main__":
    configure_logging(environment="development" if get_settings().debug_mode else "production")
    main()
