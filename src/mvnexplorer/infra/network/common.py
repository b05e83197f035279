from __future__ import annotations

from mvnexplorer import __version__

USER_AGENT = f"MvnExplorer-Client/{__version__}"
DEFAULT_TIMEOUT = 10
