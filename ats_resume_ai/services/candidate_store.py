"""
Candidate store: creates candidate rows in the hosted Supabase table.

Persistence itself belongs to the external data store; this module only posts one
candidate-creation record and returns the stored row.
"""

from typing import Dict, List, Optional, Protocol

import httpx

from config import CANDIDATES_TABLE, HTTP_TIMEOUT_SECONDS, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_URL
from schemas.candidate_record import CandidateRecord
from utils.logger import get_logger

logger = get_logger(__name__)


class CandidateStoreError(Exception):
    """The store rejected the record or could not be reached."""


class CandidateStore(Protocol):
    async def create_candidate(self, record: CandidateRecord) -> dict:
        ...


class SupabaseCandidateStore:
    """Insert via the PostgREST endpoint: POST {url}/rest/v1/{table}."""

    def __init__(
        self,
        url: str,
        service_key: str,
        table: str = "candidates",
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not url or not service_key:
            raise CandidateStoreError("Supabase configuration missing")
        self._endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._service_key = service_key
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls) -> "SupabaseCandidateStore":
        return cls(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, CANDIDATES_TABLE)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def create_candidate(self, record: CandidateRecord) -> dict:
        payload = record.model_dump(exclude_none=True)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._endpoint, headers=self._headers(), json=payload)
        except httpx.TimeoutException as e:
            raise CandidateStoreError("Candidate store timed out") from e
        except httpx.HTTPError as e:
            raise CandidateStoreError(f"Candidate store unreachable: {type(e).__name__}") from e

        if response.status_code not in (200, 201):
            logger.error("Candidate insert failed: status=%s", response.status_code)
            raise CandidateStoreError(f"Candidate insert failed ({response.status_code})")
        try:
            rows = response.json()
        except ValueError as e:
            raise CandidateStoreError("Candidate store returned an invalid response") from e
        stored = rows[0] if isinstance(rows, list) and rows else rows
        logger.info("Candidate stored: id=%s", stored.get("id") if isinstance(stored, dict) else None)
        return stored


class InMemoryCandidateStore:
    """Keeps created records in a list; for local runs without Supabase and for tests."""

    def __init__(self) -> None:
        self.rows: List[dict] = []

    async def create_candidate(self, record: CandidateRecord) -> dict:
        row = {"id": str(len(self.rows) + 1), **record.model_dump(exclude_none=True)}
        self.rows.append(row)
        return row


def get_candidate_store() -> CandidateStore:
    """Supabase when configured, otherwise an in-memory store."""
    if SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY:
        return SupabaseCandidateStore.from_env()
    logger.warning("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not set; using in-memory candidate store")
    return InMemoryCandidateStore()
