"""
Xerus bridge: glue between the desktop client, the database and the backend API.

- migrations: one-shot SQL migration runner
- repositories: adapters over the backend API, plus retired local-storage tombstones
- routers.icons: tool icon proxy
- production_logger: environment-aware logging façade
"""

__version__ = "1.0.0"
