"""Async client for the twitter-x API on RapidAPI.

Every public method maps to one GET endpoint. Responses are returned as-is
(``ApiResponse``); the only client-side state a call touches is the rate-limit
snapshot, replaced after each HTTP 200.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import httpx

from twitterx import __version__
from twitterx.errors import TwitterApiError
from twitterx.logging import get_logger
from twitterx.settings import get_settings
from twitterx.types import ApiResponse, CallOptions, ClientConfig, RateLimit

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from twitterx.logging import LogLevel

RAPIDAPI_HOST = "twitter-x.p.rapidapi.com"
RAPIDAPI_BASE_URL = f"https://{RAPIDAPI_HOST}/"
RAPIDAPI_DOCS_URL = "https://rapidapi.com/datarise-datarise-default/api/twitter-x"

DEFAULT_LIMIT = 20

Params = dict[str, str | int]


class AsyncTwitterClient:
    """twitter-x API client via RapidAPI.

    Calls may run concurrently. The rate-limit snapshot is last-write-wins:
    it reflects whichever HTTP 200 response was processed last.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        log_level: str | None = None,
        timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Twitter client.

        Args:
            api_key: RapidAPI key. If not provided, reads from settings.
            log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
                Defaults to the LOG_LEVEL setting, or INFO when that is "silent".
            timeout: Request timeout in milliseconds. Defaults to TWITTERX_TIMEOUT_MS.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.

        Raises:
            TwitterApiError: If API key is not available.
            pydantic.ValidationError: If log_level or timeout is invalid.
        """
        settings = get_settings()
        if api_key is None and settings.twitterx_apikey is not None:
            api_key = settings.twitterx_apikey.get_secret_value()
        if not api_key or not api_key.strip():
            raise TwitterApiError.api_key_missing()

        # A silent LOG_LEVEL applies only while no level is chosen explicitly
        silent = log_level is None and settings.is_silent
        if log_level is None:
            log_level = "INFO" if settings.is_silent else settings.log_level

        self._config = ClientConfig(
            api_key=api_key,
            log_level=log_level,
            timeout=timeout if timeout is not None else settings.twitterx_timeout_ms,
        )
        self._log = self._make_logger(None if silent else self._config.log_level)
        self._rate_limit = RateLimit()
        self._client = httpx.AsyncClient(
            base_url=RAPIDAPI_BASE_URL,
            headers=self._headers(),
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "x-rapidapi-key": self._config.api_key.get_secret_value(),
            "x-rapidapi-host": RAPIDAPI_HOST,
            "Content-Type": "application/json",
            "User-Agent": f"twitterx/{__version__} httpx/{httpx.__version__}",
        }

    @staticmethod
    def _make_logger(level: str | None) -> FilteringBoundLogger:
        return get_logger("twitterx.client", level=level)

    @property
    def config(self) -> ClientConfig:
        """Current instance configuration."""
        return self._config

    @property
    def rate_limit(self) -> RateLimit:
        """Rate-limit snapshot from the last successful response."""
        return self._rate_limit

    @property
    def timeout(self) -> int:
        """Request timeout in milliseconds."""
        return self._config.timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        # Resolved per request, so calls already in flight keep their timeout
        self._config = self._config.merge(CallOptions(timeout=value))

    @property
    def log_level(self) -> LogLevel:
        """Minimum log level of this client."""
        return self._config.log_level

    @log_level.setter
    def log_level(self, value: str) -> None:
        self._config = self._config.merge(CallOptions(log_level=value))
        self._log = self._make_logger(self._config.log_level)

    async def _get(
        self,
        event: str,
        path: str,
        params: Params | None = None,
        *,
        options: CallOptions | None = None,
        **context: object,
    ) -> ApiResponse:
        """Issue one GET and refresh the rate-limit snapshot on HTTP 200.

        Raises:
            TwitterApiError: On timeouts, network errors and non-2xx statuses.
        """
        config = self._config.merge(options)
        log = self._log if options is None or options.log_level is None else self._make_logger(config.log_level)

        log.info(event, **context, rate_limit_remaining=self._rate_limit.remaining)

        start = time.perf_counter()
        try:
            response = await self._client.get(path, params=params, timeout=config.timeout_seconds)
        except httpx.TimeoutException as e:
            log.error(f"{event}_timeout", timeout_ms=config.timeout)
            raise TwitterApiError.timeout(config.timeout) from e
        except httpx.RequestError as e:
            log.error(f"{event}_network_error", error=str(e))
            raise TwitterApiError.network_error(str(e)) from e
        elapsed_ms = (time.perf_counter() - start) * 1000

        result = ApiResponse.from_httpx(response, elapsed_ms=elapsed_ms)

        if response.status_code == 200:
            self._rate_limit = RateLimit.from_headers(response.headers)
            log.debug(
                "rate_limit",
                limit=self._rate_limit.limit,
                remaining=self._rate_limit.remaining,
                reset=self._rate_limit.reset,
            )

        log.debug(
            f"{event}_response",
            status=response.status_code,
            elapsed_ms=round(elapsed_ms, 2),
            rate_limit_remaining=self._rate_limit.remaining,
        )

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.warning(f"{event}_failed", status=response.status_code)
            if response.status_code == 429:
                raise TwitterApiError.rate_limited(result) from e
            raise TwitterApiError.http_error(result) from e

        return result

    @staticmethod
    def _paged(params: Params, *, limit: int | None = None, cursor: str | None = None) -> Params:
        if limit is not None:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor
        return params

    @staticmethod
    def _user_params(username: str | None, user_id: str | None) -> Params:
        """Build the identifier params of a user-scoped endpoint.

        Raises:
            TwitterApiError: Unless exactly one of username/user_id is given.
        """
        if not username and not user_id:
            raise TwitterApiError.invalid_argument("either username or user_id must be provided")
        if username and user_id:
            raise TwitterApiError.invalid_argument("pass username or user_id, not both")
        if username:
            return {"username": username}
        return {"user_id": str(user_id)}

    # Search

    async def search(
        self,
        query: str,
        *,
        section: str = "top",
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """Search tweets, users or media.

        Args:
            query: Search query.
            section: Result tab ("top", "latest", "people", "photos", "videos").
            limit: Number of results per page (default 20).
            cursor: Pagination cursor from previous response.
            options: Per-call config override.

        Returns:
            The raw API response.

        Raises:
            TwitterApiError: On API errors.
        """
        params = self._paged({"query": query, "section": section}, limit=limit, cursor=cursor)
        return await self._get(
            "search",
            "search/",
            params,
            options=options,
            query=query,
            section=section,
            limit=limit,
        )

    # Tweets

    async def tweet_details(
        self,
        tweet_id: str,
        *,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """Get a tweet and its conversation."""
        params = self._paged({"tweet_id": tweet_id}, cursor=cursor)
        return await self._get("tweet_details", "tweet/", params, options=options, tweet_id=tweet_id)

    async def tweet_retweeters(
        self,
        tweet_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List users who retweeted a tweet."""
        params = self._paged({"tweet_id": tweet_id}, limit=limit, cursor=cursor)
        return await self._get(
            "tweet_retweeters",
            "tweet/retweeters/",
            params,
            options=options,
            tweet_id=tweet_id,
            limit=limit,
        )

    async def tweet_favoriters(
        self,
        tweet_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List users who liked a tweet."""
        params = self._paged({"tweet_id": tweet_id}, limit=limit, cursor=cursor)
        return await self._get(
            "tweet_favoriters",
            "tweet/favoriters/",
            params,
            options=options,
            tweet_id=tweet_id,
            limit=limit,
        )

    # Users

    async def user_details(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """Get a user profile by username or user ID.

        Args:
            username: Twitter handle (without @).
            user_id: Numeric user ID, as a string.
            cursor: Pagination cursor from previous response.
            options: Per-call config override.

        Raises:
            TwitterApiError: If not exactly one of username/user_id is given,
                before any request is made; or on API errors.
        """
        params = self._paged(self._user_params(username, user_id), cursor=cursor)
        return await self._get("user_details", "user/details", params, options=options, **params)

    async def _user_timeline(
        self,
        event: str,
        path: str,
        username: str | None,
        user_id: str | None,
        limit: int,
        cursor: str | None,
        options: CallOptions | None,
    ) -> ApiResponse:
        identity = self._user_params(username, user_id)
        params = self._paged(dict(identity), limit=limit, cursor=cursor)
        return await self._get(event, path, params, options=options, **identity, limit=limit)

    async def user_tweets(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List a user's tweets."""
        return await self._user_timeline("user_tweets", "user/tweets", username, user_id, limit, cursor, options)

    async def user_tweets_and_replies(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List a user's tweets including replies."""
        return await self._user_timeline(
            "user_tweets_and_replies",
            "user/tweetsandreplies",
            username,
            user_id,
            limit,
            cursor,
            options,
        )

    async def user_followers(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List a user's followers."""
        return await self._user_timeline(
            "user_followers", "user/followers", username, user_id, limit, cursor, options
        )

    async def user_following(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List accounts a user follows."""
        return await self._user_timeline(
            "user_following", "user/following", username, user_id, limit, cursor, options
        )

    async def user_likes(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List tweets a user liked."""
        return await self._user_timeline("user_likes", "user/likes", username, user_id, limit, cursor, options)

    async def user_media(
        self,
        username: str | None = None,
        user_id: str | None = None,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List a user's media tweets."""
        return await self._user_timeline("user_media", "user/media", username, user_id, limit, cursor, options)

    # Lists

    async def list_details(self, list_id: str, *, options: CallOptions | None = None) -> ApiResponse:
        """Get a list's metadata."""
        return await self._get("list_details", "list/details", {"list_id": list_id}, options=options, list_id=list_id)

    async def list_tweets(
        self,
        list_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List tweets from a list's members."""
        params = self._paged({"list_id": list_id}, limit=limit, cursor=cursor)
        return await self._get("list_tweets", "list/tweets", params, options=options, list_id=list_id, limit=limit)

    # Trends

    async def trends_locations(self, *, options: CallOptions | None = None) -> ApiResponse:
        """List locations with trending topics."""
        return await self._get("trends_locations", "trends/available", options=options)

    async def trends(self, woeid: str, *, options: CallOptions | None = None) -> ApiResponse:
        """Get trending topics for a location.

        Args:
            woeid: "Where On Earth ID" of the location, sent as ``id``.
            options: Per-call config override.
        """
        return await self._get("trends", "trends/place", {"id": woeid}, options=options, woeid=woeid)

    # Communities

    async def community_details(self, community_id: str, *, options: CallOptions | None = None) -> ApiResponse:
        """Get a community's metadata."""
        return await self._get(
            "community_details",
            "community/details",
            {"community_id": community_id},
            options=options,
            community_id=community_id,
        )

    async def community_tweets(
        self,
        community_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List tweets posted in a community."""
        params = self._paged({"community_id": community_id}, limit=limit, cursor=cursor)
        return await self._get(
            "community_tweets",
            "community/tweets",
            params,
            options=options,
            community_id=community_id,
            limit=limit,
        )

    async def community_members(
        self,
        community_id: str,
        *,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
        options: CallOptions | None = None,
    ) -> ApiResponse:
        """List a community's members."""
        params = self._paged({"community_id": community_id}, limit=limit, cursor=cursor)
        return await self._get(
            "community_members",
            "community/members",
            params,
            options=options,
            community_id=community_id,
            limit=limit,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncTwitterClient:
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context manager."""
        await self.aclose()
