"""
Async HTTP client for the LinkedIn job-search API on RapidAPI.

One request per run with a fixed query: no retry, no pagination. A non-2xx
status is fatal and surfaces as ``JobsAPIError`` carrying the status code.
"""

import logging
from typing import Optional

import httpx

from .config import SearchParams
from .models import JobRecord, SearchEnvelope, extract_job_data

logger = logging.getLogger(__name__)


class JobsAPIError(Exception):
    """Raised when the job-search API responds with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LinkedInJobsClient:
    """
    Async client for the LinkedIn data API.

    Example:
        async with LinkedInJobsClient(api_key) as client:
            jobs = await client.fetch_jobs()
            for job in jobs:
                print(job.title)
    """

    API_HOST = "linkedin-data-api.p.rapidapi.com"
    BASE_URL = f"https://{API_HOST}"
    SEARCH_PATH = "/search-jobs"

    def __init__(
        self,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: RapidAPI key sent as ``x-rapidapi-key``
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "LinkedInJobsClient":
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "x-rapidapi-key": self.api_key,
                "x-rapidapi-host": self.API_HOST,
                "Accept": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _handle_response(self, response: httpx.Response) -> dict:
        """
        Check the status and decode the body.

        Raises:
            JobsAPIError: For any non-2xx status
        """
        if not response.is_success:
            raise JobsAPIError(
                f"API responded with status: {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()

    async def search_jobs(self, params: Optional[SearchParams] = None) -> SearchEnvelope:
        """
        Run one search and wrap the body with the query that produced it.

        Args:
            params: Query to send (defaults to the fixed intern search)

        Returns:
            SearchEnvelope whose ``data`` is the raw response body
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        params = params or SearchParams()
        query = params.to_query()

        logger.debug(f"Request: GET {self.SEARCH_PATH} {query}")
        response = await self._client.get(self.SEARCH_PATH, params=query)
        body = self._handle_response(response)

        return SearchEnvelope(success=True, data=body, query=query)

    async def fetch_jobs(self, params: Optional[SearchParams] = None) -> list[JobRecord]:
        """Search and normalize the result into job records."""
        envelope = await self.search_jobs(params)
        jobs = extract_job_data(envelope)
        logger.info(f"Fetched {len(jobs)} jobs for '{envelope.query.get('keywords')}'")
        return jobs
