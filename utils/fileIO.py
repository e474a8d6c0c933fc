# utils/fileIO.py — Remote persistent storage with per-file routing and durable saves

import os
from utils.storageClient import load_file as remote_load, save_file as remote_save
from utils.prestigeErrors import PersistenceFailure

PRESTIGE_LEVELS_PATH = "data/prestige_levels.json"
USER_PROFILES_PATH = "data/user_profiles.json"
ADMIN_LOG_PATH = "logs/admin_actions.json"

# Optional file-specific routing table (empty value = default base URL)
FILE_ROUTE_OVERRIDES = {
    PRESTIGE_LEVELS_PATH: os.getenv("PRESTIGE_DATA_URL", ""),
    ADMIN_LOG_PATH: os.getenv("ADMIN_LOG_DATA_URL", ""),
}

def _route(path, base_url_override=None):
    return base_url_override or FILE_ROUTE_OVERRIDES.get(path) or None

async def load_file(path, base_url_override=None):
    """
    Loads a JSON document, applying the routing table.
    Missing documents come back as None.
    """
    final_url = _route(path, base_url_override)
    print(f"📡 [fileIO] Requesting remote load for: {path} (Base URL: {final_url or 'default'})")

    try:
        data = await remote_load(path, base_url_override=final_url)
        print(f"✅ [fileIO] Successfully loaded: {path}")
        return data
    except Exception as e:
        print(f"❌ [fileIO] Failed to load {path}: {e}")
        raise

async def save_file(path, data, base_url_override=None):
    """
    Saves a JSON document durably.
    Raises PersistenceFailure when the storage client could not write it.
    """
    final_url = _route(path, base_url_override)
    print(f"📡 [fileIO] Requesting remote save for: {path} (Base URL: {final_url or 'default'})")

    try:
        saved = await remote_save(path, data, base_url_override=final_url)
    except Exception as e:
        print(f"❌ [fileIO] Failed to save {path}: {e}")
        raise PersistenceFailure(f"Could not save {path}: {e}") from e

    if not saved:
        print(f"❌ [fileIO] Storage rejected save for: {path}")
        raise PersistenceFailure(f"Storage rejected save for {path}")
    print(f"✅ [fileIO] Successfully saved: {path}")
