"""
Core resource entity and the field resolution protocol.

A Resource wraps one normalized URL. Each named field (``basic``, ``meta``,
``images``...) is resolved lazily through three tiers:

1. the per-instance field cache,
2. the persistent cache backend, under namespace ``link_<field>``,
3. the handler's compute routine, whose result is written back to both.

Handlers declare the fields they support through ``_field_computers()``;
requesting a field with no routine yields ``ABSENT`` rather than an error.
"""

from __future__ import annotations

import logging
import re
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
)

from pydantic import ValidationError

from ..cache.backends import CacheBackendInterface
from ..config.models import ResourceSettings
from ..exceptions import (
    BadFieldRequestError,
    FetchFailedError,
    InvalidURLError,
    UnhandledResourceTypeError,
)
from ..http.client import FetchClient
from ..models.base import ABSENT
from ..models.resource import ClassificationRecord, ResourceIdentity, ResourceType
from ..utils.text import decode_body, encode_body
from ..utils.url import is_valid_url, normalize_url
from .thumbnail import default_thumbnail

if TYPE_CHECKING:
    from .registry import ResourceTypeRegistry

logger = logging.getLogger(__name__)

FieldComputer = Callable[[], Awaitable[Any]]

_FIELD_PATTERN = re.compile(r"[A-Za-z]+")


def _default_registry() -> ResourceTypeRegistry:
    from .registry import resource_registry

    return resource_registry


async def fetch_classification(
    url: str, client: FetchClient, registry: ResourceTypeRegistry
) -> ClassificationRecord:
    """
    Fetch ``url`` and classify the response.

    Raises:
        FetchFailedError: If the fetch client cannot retrieve the URL
    """
    response = await client.get(url)
    mime_type = (response.mime_type or "").lower()
    return ClassificationRecord(
        mime_type=mime_type,
        body=encode_body(response.body),
        url=url,
        handler=registry.classify(url, mime_type, response.body),
    )


class Resource:
    """
    Base class for all resource handlers.

    Subclasses set ``RESOURCE_TYPE`` and ``PRIORITY``, implement ``applies()``
    and extend ``_field_computers()`` with their own field routines.
    """

    RESOURCE_TYPE: ResourceType = ResourceType.GENERIC
    PRIORITY: int = 0

    def __init__(
        self,
        url: str,
        cache: CacheBackendInterface,
        client: FetchClient,
        ttl: Optional[int] = None,
        classification: Optional[ClassificationRecord] = None,
        initial_data: Optional[Dict[str, Any]] = None,
        registry: Optional[ResourceTypeRegistry] = None,
        settings: Optional[ResourceSettings] = None,
        identity: Optional[ResourceIdentity] = None,
    ) -> None:
        """
        Initialize a resource.

        Prefer ``await Resource.instance(url, ...)``, which validates the URL
        and picks the right handler class.

        Args:
            url: Resource URL (normalized here)
            cache: Persistent cache backend
            client: Fetch client
            ttl: Lifetime of cached field values in seconds
            classification: Body-less classification record for this URL
            initial_data: Values to seed the field cache with (not persisted)
            registry: Registry used when the ``basic`` field is recomputed
            settings: Resource settings
            identity: Prebuilt identity; overrides ``url`` and ``ttl``
        """
        self.settings = settings or ResourceSettings()
        self.cache = cache
        self.client = client
        self._registry = registry
        self._identity = identity or ResourceIdentity.for_url(
            normalize_url(url), ttl if ttl is not None else self.settings.ttl_seconds
        )
        self._classification = classification
        self._data: Dict[str, Any] = dict(initial_data or {})
        # Set while ``basic`` holds a stand-in for an unreachable URL
        self._degraded = False
        self._computers: Dict[str, FieldComputer] = self._field_computers()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.url!r})"

    @classmethod
    def applies(cls, url: str, mime_type: str, body: bytes) -> bool:
        """Return True if this handler can handle the given response."""
        return False

    @classmethod
    async def instance(
        cls,
        url: str,
        cache: CacheBackendInterface,
        client: FetchClient,
        ttl: Optional[int] = None,
        *,
        registry: Optional[ResourceTypeRegistry] = None,
        settings: Optional[ResourceSettings] = None,
    ) -> Resource:
        """
        Resolve a URL into a resource of the appropriate type.

        The classification is read from the ``link_basic`` cache namespace, or
        fetched and classified on a miss. A URL that cannot be fetched yields
        an empty ``GenericResource`` rather than an error.

        Args:
            url: URL to resolve; ``example.com/page`` is treated as ``http://``
            cache: Persistent cache backend
            client: Fetch client
            ttl: Lifetime of cached values (defaults to ``settings.ttl_seconds``)
            registry: Handler registry (defaults to the global registry)
            settings: Resource settings

        Returns:
            A handler instance for the URL

        Raises:
            InvalidURLError: If the URL does not normalize to a valid http(s) URL
            UnhandledResourceTypeError: If the classification names an
                unregistered resource type
        """
        settings = settings or ResourceSettings()
        if registry is None:
            registry = _default_registry()

        normalized = normalize_url(url)
        if not is_valid_url(normalized):
            raise InvalidURLError(f"Invalid URL: {url}", url=str(url))

        identity = ResourceIdentity.for_url(
            normalized, ttl if ttl is not None else settings.ttl_seconds
        )
        namespace = f"{settings.namespace_prefix}basic"
        initial_data: Optional[Dict[str, Any]] = None

        record = await cls._cached_classification(cache, namespace, identity.cache_key)
        if record is None:
            try:
                record = await fetch_classification(normalized, client, registry)
            except FetchFailedError as e:
                logger.warning(f"Could not fetch {normalized}, treating as empty resource: {e}")
                record = ClassificationRecord(url=normalized)
                initial_data = {"basic": record.model_dump(mode="json")}
            else:
                logger.info(
                    f"Classified {normalized} as {record.handler.value} "
                    f"({record.mime_type or 'no mime type'})"
                )
                await cache.store(
                    namespace,
                    identity.cache_key,
                    record.model_dump(mode="json"),
                    identity.expiry_timestamp,
                )

        handler_cls = registry.get(record.handler)
        if handler_cls is None:
            raise UnhandledResourceTypeError(
                f"Did not know how to handle {record.handler.value} resource type",
                url=normalized,
                resource_type=record.handler,
            )

        resource = handler_cls(
            normalized,
            cache,
            client,
            classification=record.without_body(),
            initial_data=initial_data,
            registry=registry,
            settings=settings,
            identity=identity,
        )
        resource._degraded = initial_data is not None
        return resource

    @staticmethod
    async def _cached_classification(
        cache: CacheBackendInterface, namespace: str, cache_key: str
    ) -> Optional[ClassificationRecord]:
        cached = await cache.get(namespace, cache_key)
        if cached is None:
            logger.debug(f"Classification cache miss for {cache_key}")
            return None
        try:
            return ClassificationRecord.model_validate(cached.data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed classification record for {cache_key}: {e}")
            return None

    # Accessors

    @property
    def identity(self) -> ResourceIdentity:
        return self._identity

    @property
    def url(self) -> str:
        return self._identity.url

    @property
    def cache_key(self) -> str:
        return self._identity.cache_key

    @property
    def ttl(self) -> int:
        return self._identity.ttl_seconds

    @property
    def expiry(self) -> int:
        return self._identity.expiry_timestamp

    @property
    def resource_type(self) -> ResourceType:
        return self.RESOURCE_TYPE

    @property
    def mime_type(self) -> str:
        """Mime type from the loaded ``basic`` field, else from the classification."""
        basic = self._data.get("basic")
        if isinstance(basic, dict) and basic.get("mime_type"):
            return basic["mime_type"]
        if self._classification is not None:
            return self._classification.mime_type
        return ""

    @property
    def classification(self) -> Optional[ClassificationRecord]:
        return self._classification

    @property
    def supported_fields(self) -> FrozenSet[str]:
        return frozenset(self._computers)

    def has_field(self, field: str) -> bool:
        """Return True if this resource type can compute ``field``."""
        return field in self._computers

    def default_thumbnail(self) -> str:
        return default_thumbnail(self.settings)

    # Field resolution

    def _field_computers(self) -> Dict[str, FieldComputer]:
        """Return the table of field name to compute routine for this handler."""
        return {"basic": self._compute_basic}

    def _namespace(self, field: str) -> str:
        return f"{self.settings.namespace_prefix}{field}"

    def _validate_field(self, field: Any) -> None:
        if not isinstance(field, str) or not _FIELD_PATTERN.fullmatch(field):
            raise BadFieldRequestError(
                f"Bad data type requested: {field!r}", field=field, url=self.url
            )

    async def _compute_and_store(self, field: str, computer: FieldComputer) -> Any:
        value = await computer()
        self._data[field] = value
        if self._degraded:
            logger.debug(f"Not persisting {field} of unreachable {self.url}")
            return value
        await self.cache.store(
            self._namespace(field), self.cache_key, value, self.expiry
        )
        logger.debug(f"Computed {field} for {self.url}")
        return value

    async def get(self, field: str, force_refresh: bool = False) -> Any:
        """
        Get a single field.

        Args:
            field: Field name (letters only)
            force_refresh: Skip both cache tiers and recompute

        Returns:
            The field value, or ``ABSENT`` if this resource type has no such field

        Raises:
            BadFieldRequestError: If ``field`` is not a plain alphabetic name
        """
        self._validate_field(field)

        if not force_refresh:
            if field in self._data:
                return self._data[field]

            cached = await self.cache.get(self._namespace(field), self.cache_key)
            if cached is not None:
                logger.debug(f"Persistent cache hit for {field} of {self.url}")
                self._data[field] = cached.data
                return cached.data

        computer = self._computers.get(field)
        if computer is None:
            return ABSENT
        return await self._compute_and_store(field, computer)

    async def get_all(
        self, fields: Iterable[str], force_refresh: bool = False
    ) -> Dict[str, Any]:
        """
        Get several fields at once.

        Fields found in the field cache are not looked up again; the rest are
        fetched from the persistent cache in one batch, and whatever is still
        missing is computed one field at a time. Fields this resource type
        cannot compute are left out of the result.

        Args:
            fields: Field names to get
            force_refresh: Skip both cache tiers and recompute

        Returns:
            Mapping of field name to value

        Raises:
            BadFieldRequestError: If any field name is not plain alphabetic, or
                ``fields`` is a single string rather than a collection of names
        """
        if isinstance(fields, (str, bytes)):
            raise BadFieldRequestError(
                f"Expected a collection of field names, got {fields!r}",
                field=fields,
                url=self.url,
            )

        requested: List[str] = []
        for field in fields:
            self._validate_field(field)
            if field not in requested:
                requested.append(field)

        result: Dict[str, Any] = {}
        remaining = requested

        if not force_refresh:
            for field in requested:
                if field in self._data:
                    result[field] = self._data[field]
            remaining = [field for field in requested if field not in result]

            if remaining:
                cached = await self.cache.get_all(
                    self.cache_key, remaining, self.settings.namespace_prefix
                )
                for field, record in cached.items():
                    if field in remaining:
                        self._data[field] = record.data
                        result[field] = record.data
                logger.debug(
                    f"get_all for {self.url}: {len(requested) - len(remaining)} local, "
                    f"{len(cached)} persistent hits"
                )
                remaining = [field for field in remaining if field not in result]

        for field in remaining:
            computer = self._computers.get(field)
            if computer is not None:
                result[field] = await self._compute_and_store(field, computer)

        return result

    def body(self) -> bytes:
        """
        Return the decompressed response body.

        Only available once the ``basic`` field is loaded; call
        ``await resource.get("basic")`` first. Returns ``b""`` otherwise.
        """
        basic = self._data.get("basic")
        if not isinstance(basic, dict) or not basic.get("body"):
            return b""
        try:
            return decode_body(basic["body"])
        except ValueError as e:
            logger.warning(f"Discarding undecodable body for {self.url}: {e}")
            return b""

    async def get_filesize(self, url: Optional[str] = None) -> Optional[int]:
        """Return the remote size in bytes of ``url`` (default: this resource), or None."""
        return await self.client.content_length(url or self.url)

    # Compute routines

    async def _compute_basic(self) -> Dict[str, Any]:
        """
        Fetch and classify the URL again.

        An unreachable URL yields an empty generic record. It and any field
        computed from it stay in the field cache only, so a later refresh
        retries the fetch.
        """
        registry = self._registry if self._registry is not None else _default_registry()
        try:
            record = await fetch_classification(self.url, self.client, registry)
        except FetchFailedError as e:
            logger.warning(f"Could not refetch {self.url}, treating as empty resource: {e}")
            self._degraded = True
            record = ClassificationRecord(url=self.url)
        else:
            self._degraded = False
        return record.model_dump(mode="json")
