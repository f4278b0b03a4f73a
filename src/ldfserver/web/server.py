import logging

import click
from dotenv import load_dotenv
from waitress import serve

from ldfserver.context import ConfigError
from ldfserver.datasources import DataSourceInitError
from ldfserver.utils import configure_logging
from ldfserver.web import create_app, __version__

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    '--listen',
    default='0.0.0.0:5000',
    help='Address and port to listen on. Default is "0.0.0.0:5000".',
    metavar='[ADDRESS]:PORT',
)
@click.option(
    '-c', '--config-file',
    type=click.Path(exists=True),
    help='Configuration file',
    required=True,
)
@click.option(
    '--log-dir',
    type=click.Path(file_okay=False),
    help='Directory to write a log file to, in addition to the console',
)
@click.option(
    '-v', '--verbose',
    is_flag=True,
    help='Log debugging information to the console',
)
def run(listen: str, config_file: str, log_dir: str, verbose: bool):
    load_dotenv()
    configure_logging(log_dir=log_dir, verbose=verbose)
    server_identity = f'ldf-server/{__version__}'
    logger.info(f'Starting {server_identity}')
    try:
        app = create_app(config_file)
    except (ConfigError, DataSourceInitError) as e:
        logger.error(f'Exiting: {e}')
        raise SystemExit(1) from e

    # stores are closed once serve() returns and no more requests are dispatched
    with app.config['CONTEXT'].registry:
        try:
            serve(
                app=app,
                listen=listen,
                ident=server_identity,
            )
        except (OSError, RuntimeError) as e:
            logger.error(f'Exiting: {e}')
            raise SystemExit(1) from e
    logger.info(f'Stopped {server_identity}')


if __name__ == "__main__":
    run()
