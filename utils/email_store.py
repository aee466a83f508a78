from __future__ import annotations
import os
import json
import tempfile
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from core.config import EMAILS_FILE, logger
from models.signups import EmailStoreDocument


class EmailStoreProtocol(Protocol):
    async def initialize(self) -> None:
        ...

    async def read_all(self) -> EmailStoreDocument:
        ...

    async def write_all(self, document: EmailStoreDocument) -> bool:
        ...


class JsonFileEmailStore:
    """Both signup lists kept in one JSON document on local disk.

    Every call goes to disk; nothing is cached between requests. Blocking
    file work runs in the threadpool so other requests keep being served.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    # ---------- INITIALIZE ----------
    def _initialize_sync(self) -> bool:
        if os.path.exists(self.path):
            return False
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self._dump(EmailStoreDocument())
        return True

    async def initialize(self) -> None:
        created = await run_in_threadpool(self._initialize_sync)
        if created:
            logger.info(f"Created email store at {self.path}")

    # ---------- READ ----------
    def _read_sync(self) -> EmailStoreDocument:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        lists = {}
        for key in ("newsletter", "discount"):
            value = data.get(key)
            if value is None:
                value = []
            if not isinstance(value, list):
                raise ValueError(f"'{key}' should be a list, got {type(value).__name__}")
            lists[key] = value
        # Entries are passed through untouched
        return EmailStoreDocument(**lists)

    async def read_all(self) -> EmailStoreDocument:
        # Fail-open: a broken store reads as empty rather than failing the request
        try:
            return await run_in_threadpool(self._read_sync)
        except (OSError, ValueError) as ex:
            logger.error(f"Error reading emails from {self.path}: {ex}")
            return EmailStoreDocument()

    # ---------- WRITE ----------
    def _dump(self, document: EmailStoreDocument) -> None:
        data = json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False)
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix=".emails-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    async def write_all(self, document: EmailStoreDocument) -> bool:
        try:
            await run_in_threadpool(self._dump, document)
            return True
        except (OSError, TypeError, ValueError) as ex:
            logger.error(f"Error writing emails to {self.path}: {ex}")
            return False


def _build_store() -> EmailStoreProtocol:
    return JsonFileEmailStore(EMAILS_FILE)


email_store: EmailStoreProtocol = _build_store()
