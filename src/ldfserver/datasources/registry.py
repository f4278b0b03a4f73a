import logging
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ldfserver.datasources import (
    DataSource,
    DataSourceInitError,
    DataSourceNotFound,
    get_datasource_type,
)
from ldfserver.datasources.index import create_index_datasource, dataset_url

logger = logging.getLogger(__name__)

FAIL = 'fail'
SKIP = 'skip'
ERROR_POLICIES = (FAIL, SKIP)
DEFAULT_TITLE = 'Linked Data Fragments server'


class DataSourceRegistry:
    """Named data sources, plus the index source that describes them.

    The registry is filled by `register()` during startup and is read-only
    once `freeze()` has been called. It is also a context manager that
    closes every backing store on exit."""

    def __init__(self, base_url: str, title: str = DEFAULT_TITLE, on_error: str = FAIL):
        if on_error not in ERROR_POLICIES:
            raise ValueError(f'Unknown data source error policy "{on_error}"; expected one of {ERROR_POLICIES}')
        self.base_url = base_url.rstrip('/')
        self.title = title
        self.on_error = on_error
        self._datasources: dict[str, DataSource] = {}
        self._index: Optional[DataSource] = None

    def __enter__(self) -> 'DataSourceRegistry':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __len__(self):
        return len(self._datasources)

    def __contains__(self, name: str):
        return name in self._datasources

    @property
    def datasources(self) -> Mapping[str, DataSource]:
        return MappingProxyType(self._datasources)

    @property
    def frozen(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> DataSource:
        if self._index is None:
            raise RuntimeError('Registry has not been frozen; the index is not built yet')
        return self._index

    def add(self, datasource: DataSource):
        if self.frozen:
            raise RuntimeError('Cannot add data sources to a frozen registry')
        self._datasources[datasource.name] = datasource

    def register(self, config: Mapping[str, Mapping[str, Any]]):
        """Instantiate a data source for each `{name: {type, title,
        description, settings}}` entry of `config`."""
        for name, datasource_config in config.items():
            try:
                datasource = self.create(name, datasource_config)
            except DataSourceInitError as e:
                if self.on_error == SKIP:
                    logger.warning(f'Skipping data source: {e}')
                    continue
                logger.error(str(e))
                raise
            self.add(datasource)
            logger.info(f'Registered data source "{name}" at {dataset_url(self.base_url, name)}')

    @staticmethod
    def create(name: str, config: Mapping[str, Any]) -> DataSource:
        try:
            store_class = get_datasource_type(config.get('type'))
            store = store_class.from_settings(config.get('settings') or {})
        except Exception as e:
            raise DataSourceInitError(name, str(e)) from e

        return DataSource(
            name=name,
            title=config.get('title') or name,
            description=config.get('description') or '',
            store=store,
        )

    def freeze(self) -> 'DataSourceRegistry':
        """Build the index source. No data sources can be added afterward."""
        if not self.frozen:
            self._index = create_index_datasource(self.base_url, self._datasources.values(), self.title)
        return self

    def resolve(self, path: str) -> DataSource:
        """Return the index for an empty path or `/`, or else the data source
        with the given name."""
        name = (path or '').lstrip('/')
        if name == '':
            return self.index
        try:
            return self._datasources[name]
        except KeyError:
            raise DataSourceNotFound(name)

    def url_for(self, datasource: DataSource) -> str:
        return dataset_url(self.base_url, datasource.name)

    def close(self):
        """Close every backing store. Failures are logged and ignored."""
        for datasource in self._datasources.values():
            try:
                datasource.close()
            except Exception as e:
                logger.warning(f'Error closing data source "{datasource.name}": {e}')
        if self._index is not None:
            self._index.close()
