# utils/storageClient.py — Remote JSON Loader/Saver for prestige persistence

import os
import aiohttp
import json
import asyncio
from typing import Optional

# --------------------------- shared HTTP session --------------------------- #
# One session for the whole bot; bot.py closes it on shutdown.
SESSION: Optional[aiohttp.ClientSession] = None

_DEFAULT_TIMEOUT = aiohttp.ClientTimeout(
    total=25,           # hard cap per request
    connect=10,         # TCP connect
    sock_connect=10,
    sock_read=15,
)

def _base_url(override=None) -> str:
    # 🔗 Read lazily so the prestige modules import without storage configured
    base_url = (override or os.getenv("PERSISTENT_DATA_URL", "")).rstrip("/")
    if not base_url:
        raise RuntimeError("❌ Environment variable PERSISTENT_DATA_URL is not set!")
    return base_url

async def _get_session() -> aiohttp.ClientSession:
    """Get or create the shared aiohttp session."""
    global SESSION
    if SESSION is None or SESSION.closed:
        connector = aiohttp.TCPConnector(limit=20, enable_cleanup_closed=True)
        SESSION = aiohttp.ClientSession(connector=connector, timeout=_DEFAULT_TIMEOUT)
        print("🌐 [storageClient] Created shared HTTP session")
    return SESSION

async def close_session():
    global SESSION
    if SESSION is not None and not SESSION.closed:
        await SESSION.close()
        print("🧹 [storageClient] Closed shared HTTP session.")
    SESSION = None

# ----------------------------- core helpers ------------------------------- #

async def _retry(coro_func, *args, attempts=3, base_delay=0.5, **kwargs):
    """
    Async retry with exponential backoff.
    Retries on network errors and on 5xx responses raised by the caller.
    """
    last_exc = None
    for i in range(attempts):
        try:
            return await coro_func(*args, **kwargs)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            last_exc = e
            if i < attempts - 1:
                delay = base_delay * (2 ** i)
                print(f"⏳ [storageClient] Retry in {delay:.1f}s due to: {e!r}")
                await asyncio.sleep(delay)
    raise last_exc if last_exc else RuntimeError("Unknown retry failure")

# --------------------------------- API ------------------------------------ #

async def load_file(filename, base_url_override=None):
    """
    Load a JSON document from persistent storage.

    A 404 means the document was never written and returns None, so a fresh
    deployment starts with empty prestige data. Any other failure raises.
    """
    url = f"{_base_url(base_url_override)}/{filename}"
    print(f"📥 [storageClient] Loading file from: {url}")

    session = await _get_session()

    async def _do_get():
        async with session.get(url) as resp:
            if resp.status == 404:
                print(f"ℹ️ [storageClient] {filename} not found, starting empty")
                return None
            if resp.status != 200:
                text = await resp.text()
                if 500 <= resp.status < 600:
                    raise aiohttp.ClientResponseError(
                        resp.request_info, resp.history, status=resp.status, message=text
                    )
                raise FileNotFoundError(f"❌ Load failed {url} (HTTP {resp.status}): {text[:200]}")
            result = await resp.json(content_type=None)
            print(f"✅ [storageClient] JSON load success: {filename}")
            return result

    try:
        return await _retry(_do_get)
    except Exception as e:
        print(f"⚠️ [storageClient] Error loading {filename}: {e}")
        raise

async def save_file(filename, data, base_url_override=None):
    """
    Save a JSON document with HTTP PUT.

    Returns True on success, False on failure. Callers that need durability
    check the result (see utils.fileIO.save_file).
    """
    url = f"{_base_url(base_url_override)}/{filename}"
    json_data = json.dumps(data, indent=2, sort_keys=True)

    print(f"📤 [storageClient] Save requested: {filename}")

    session = await _get_session()

    async def _do_put():
        async with session.put(
            url,
            data=json_data,
            headers={"Content-Type": "application/json"}
        ) as resp:
            if resp.status in (200, 201, 204):
                print(f"✅ [storageClient] Save successful: {filename}")
                return True
            response_text = await resp.text()
            if 500 <= resp.status < 600:
                raise aiohttp.ClientResponseError(
                    resp.request_info, resp.history, status=resp.status, message=response_text
                )
            print(f"⚠️ [storageClient] Save failed for {filename}: HTTP {resp.status}")
            print(f"🧾 [storageClient] Response: {response_text[:400]}")
            return False

    try:
        return await _retry(_do_put)
    except Exception as e:
        print(f"❌ [storageClient] Save error for {filename}: {e}")
        return False
