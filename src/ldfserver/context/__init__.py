import logging
from dataclasses import dataclass, field
from importlib.metadata import version
from typing import Any, Optional

from rdflib.namespace import NamespaceManager

from ldfserver.datasources import DataSourceInitError
from ldfserver.datasources.registry import DEFAULT_TITLE, FAIL, DataSourceRegistry
from ldfserver.fragments.parser import DEFAULT_PAGE_SIZE, FragmentRequestParser
from ldfserver.namespaces import get_manager
from ldfserver.negotiation import DEFAULT_FORMATS, ContentNegotiator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000'


class ConfigError(Exception):
    pass


@dataclass
class ServerContext:
    """Everything the request handlers share. Built once, before the server
    starts accepting requests, by `ServerContext.from_config()`, and not
    modified afterward."""
    config: dict[str, Any] = field(default_factory=dict)
    registry: Optional[DataSourceRegistry] = None
    parser: Optional[FragmentRequestParser] = None
    negotiator: Optional[ContentNegotiator] = None
    namespace_manager: Optional[NamespaceManager] = None

    @property
    def version(self):
        return version('ldf-server')

    @property
    def server_config(self) -> dict[str, Any]:
        return self.config.get('SERVER') or {}

    @property
    def prefixes(self) -> dict[str, str]:
        return self.config.get('PREFIXES') or {}

    @property
    def base_url(self) -> str:
        return str(self.server_config.get('BASE_URL', DEFAULT_BASE_URL)).rstrip('/')

    @property
    def title(self) -> str:
        return self.server_config.get('TITLE', DEFAULT_TITLE)

    def new_namespace_manager(self) -> NamespaceManager:
        """A manager with the same bindings as `namespace_manager`, for
        formatting the terms of a single response. Formatting a term with a
        manager records its namespace there, so the shared one is left alone."""
        return get_manager(prefixes=self.prefixes)

    @classmethod
    def from_config(cls, config: Optional[dict[str, Any]]) -> 'ServerContext':
        """Build the namespace manager, request parser, content negotiator,
        and data source registry described by `config`.

        Raises `ConfigError` for malformed configuration, and lets
        `DataSourceInitError` propagate when a data source fails to open
        and the `ON_DATASOURCE_ERROR` policy is `fail`."""
        if config is not None and not isinstance(config, dict):
            raise ConfigError('The configuration must be a mapping of section name to settings')
        context = cls(config=config or {})
        server_config = context.server_config
        if not isinstance(server_config, dict):
            raise ConfigError("'SERVER' must be a mapping of setting name to value")

        if not isinstance(context.prefixes, dict):
            raise ConfigError("'PREFIXES' must be a mapping of prefix to namespace")
        context.namespace_manager = get_manager(prefixes=context.prefixes)

        try:
            page_size = int(server_config.get('PAGE_SIZE', DEFAULT_PAGE_SIZE))
            context.parser = FragmentRequestParser(page_size=page_size, nsm=context.namespace_manager)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid 'PAGE_SIZE' in section 'SERVER': {e}") from e

        try:
            context.negotiator = ContentNegotiator.from_formats(server_config.get('FORMATS', DEFAULT_FORMATS))
        except ValueError as e:
            raise ConfigError(f"Invalid 'FORMATS' in section 'SERVER': {e}") from e

        datasources = context.config.get('DATASOURCES') or {}
        if not isinstance(datasources, dict):
            raise ConfigError("'DATASOURCES' must be a mapping of name to data source configuration")
        try:
            context.registry = DataSourceRegistry(
                base_url=context.base_url,
                title=context.title,
                on_error=server_config.get('ON_DATASOURCE_ERROR', FAIL),
            )
        except ValueError as e:
            raise ConfigError(f"Invalid 'ON_DATASOURCE_ERROR' in section 'SERVER': {e}") from e
        try:
            context.registry.register(datasources)
        except DataSourceInitError:
            # release the stores that did open before giving up
            context.registry.close()
            raise
        context.registry.freeze()
        logger.info(f'Serving {len(context.registry)} data source(s) at {context.base_url}')

        return context
