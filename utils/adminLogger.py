# utils/adminLogger.py — Remote persistent audit log for moderator prestige actions

from datetime import datetime
import pytz

from utils.fileIO import load_file, save_file, ADMIN_LOG_PATH

MAX_LOG_ENTRIES = 500


async def log_admin_action(admin_id, target_id, action_type, details, note=None):
    """
    Appends one entry to logs/admin_actions.json, keeping the newest
    MAX_LOG_ENTRIES. The audit log is best-effort: a failure is printed and
    never undoes the action being logged.
    """
    try:
        logs = await load_file(ADMIN_LOG_PATH)
        if not isinstance(logs, list):
            logs = []

        log_entry = {
            "timestamp": datetime.now(pytz.utc).isoformat(),
            "admin": str(admin_id),
            "target": str(target_id),
            "action": action_type,
            "details": details
        }
        if note:
            log_entry["note"] = note

        logs.append(log_entry)
        if len(logs) > MAX_LOG_ENTRIES:
            logs = logs[-MAX_LOG_ENTRIES:]

        await save_file(ADMIN_LOG_PATH, logs)
        print(f"📝 [AdminLogger] Logged admin action: {action_type} -> {target_id}")

    except Exception as e:
        print(f"❌ [LOGGER ERROR] Failed to log admin action: {e}")
