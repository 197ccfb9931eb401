"""Application configuration module.

- **settings.py**: Environment-based settings (Pydantic BaseSettings)
  - Database URL, Supabase directory/storage endpoints and service key
  - Query defaults (page size, max page size, default sort field)
  - Names of the badges granted by profile lifecycle events
  - Loaded from .env file via pydantic-settings
"""
from app.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
