import copy
import logging
import logging.config
import os
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_LOGGING_OPTIONS = {
    'version': 1,
    'formatters': {
        'full': {
            'format': '%(levelname)s|%(asctime)s|%(threadName)s|%(name)s|%(message)s'
        },
        'messageonly': {
            'format': '%(message)s'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'full',
            'stream': 'ext://sys.stderr'
        },
    },
    'loggers': {
        '__main__': {
            'level': 'DEBUG',
            'handlers': ['console'],
            'propagate': False
        },
        'ldfserver': {
            'level': 'DEBUG',
            'handlers': ['console'],
            'propagate': False
        },
        'waitress': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        },
    },
    'root': {
        'level': 'INFO'
    }
}
logger = logging.getLogger(__name__)


def envsubst(value: str | list | dict, env: Mapping[str, str] = None) -> str | list | dict:
    """
    Recursively replace `${VAR_NAME}` placeholders in value with the values of the
    corresponding keys of env. If env is not given, it defaults to the environment
    variables in os.environ.

    Any placeholders that do not have a corresponding key in the env dictionary
    are left as is.

    :param value: String, list, or dictionary to search for `${VAR_NAME}` placeholders.
    :param env: Dictionary of values to use as replacements. If not given, defaults
        to `os.environ`.
    :return: If `value` is a string, returns the result of replacing `${VAR_NAME}` with the
        corresponding `value` from env. If `value` is a list, returns a new list where each
        item in `value` replaced with the result of calling `envsubst()` on that item. If
        `value` is a dictionary, returns a new dictionary where each item in `value` is replaced
        with the result of calling `envsubst()` on that item.
    """
    if env is None:
        env = os.environ
    if isinstance(value, str):
        if '${' in value:
            try:
                return value.replace('${', '{').format(**env)
            except KeyError as e:
                missing_key = str(e.args[0])
                logger.warning(f'Environment variable ${{{missing_key}}} not found')
                # for a missing key, just return the string without substitution
                return envsubst(value, {missing_key: f'${{{missing_key}}}', **env})
        else:
            return value
    elif isinstance(value, list):
        return [envsubst(v, env) for v in value]
    elif isinstance(value, dict):
        return {k: envsubst(v, env) for k, v in value.items()}
    else:
        return value


def configure_logging(log_dir: Optional[str] = None, verbose: bool = False) -> None:
    """Configure logging from `DEFAULT_LOGGING_OPTIONS`. When `log_dir` is
    given, a timestamped DEBUG-level log file is written there as well."""
    logging_options = copy.deepcopy(DEFAULT_LOGGING_OPTIONS)

    if log_dir is not None:
        log_dirname = Path(log_dir)
        log_dirname.mkdir(parents=True, exist_ok=True)
        now = datetime.utcnow().strftime('%Y%m%d%H%M%S')
        logging_options['handlers']['file'] = {
            'class': 'logging.FileHandler',
            'level': 'DEBUG',
            'formatter': 'full',
            'filename': str(log_dirname / f'ldf-server.{now}.log'),
        }
        for logger_options in logging_options['loggers'].values():
            logger_options['handlers'].append('file')

    # manipulate console verbosity
    if verbose:
        logging_options['handlers']['console']['level'] = 'DEBUG'

    logging.config.dictConfig(logging_options)
