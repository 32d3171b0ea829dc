import argparse
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from weatherservice.core.config import AppConfig, DatabaseConfig, LoggingConfig, load_config
from weatherservice.core.db import Database, db_url_from_path
from weatherservice.core.errors import WeatherServiceError
from weatherservice.forecast.seeder import SeedTask
from weatherservice.forecast.service import ForecastService
from weatherservice.forecast.store import ForecastStore

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


def setup_basic_logging():
    """Setup basic stdout logging before config is loaded"""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.DEBUG)
        logging.debug("Basic logging initialized")


def setup_logging(config: LoggingConfig) -> None:
    """Configure logging to write to both file and stdout"""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(getattr(logging, config.level))

    formatter = logging.Formatter(LOG_FORMAT)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


@dataclass
class Components:
    database: Database
    store: ForecastStore
    seeder: SeedTask
    service: ForecastService


def database_url(config: DatabaseConfig) -> Optional[str]:
    if config.url:
        return config.url
    if config.path:
        return db_url_from_path(config.path)
    return None


def build_components(config: AppConfig, rng: Optional[random.Random] = None) -> Components:
    """Construct database, store, seeder and service and wire them together."""
    database = Database(database_url(config.database))
    store = ForecastStore(database)
    seeder = SeedTask(store, config.seed, rng or random.Random())
    service = ForecastService(store, config.location)
    return Components(database=database, store=store, seeder=seeder, service=service)


def serve(config: AppConfig) -> None:
    from weatherservice.api.server import create_app, run_api_server

    components = build_components(config)
    try:
        components.seeder.run()
        run_api_server(create_app(components.service), config.api)
    finally:
        components.database.dispose()


def seed(config: AppConfig) -> int:
    components = build_components(config)
    try:
        return components.seeder.run()
    finally:
        components.database.dispose()


def fetch(config: AppConfig) -> None:
    from weatherservice.client.forecast_client import ForecastClient

    client = ForecastClient(config.client)
    try:
        for forecast in client.get_forecast():
            print(
                f"{forecast.date.isoformat()}  {forecast.temperature_c:>4}C "
                f"{forecast.temperature_f:>4}F  {forecast.summary or ''}"
            )
    finally:
        client.close()


def main(argv: Optional[List[str]] = None) -> int:
    setup_basic_logging()

    parser = argparse.ArgumentParser(description='Weather Service')
    parser.add_argument('--config',
                        help='Path to config file (default: ./config.yaml)')
    subparsers = parser.add_subparsers(dest='command')
    subparsers.add_parser('serve', help='Seed the store if needed, then serve the API')
    subparsers.add_parser('seed', help='Run the seed task and exit')
    subparsers.add_parser('client', help='Fetch forecasts from the configured service')

    args = parser.parse_args(argv)
    command = args.command or 'serve'

    try:
        config = load_config(args.config)
        setup_logging(config.logging)
        if command == 'seed':
            seed(config)
        elif command == 'client':
            fetch(config)
        else:
            serve(config)
    except WeatherServiceError as e:
        logging.error(f"{command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
