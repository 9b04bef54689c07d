"""
Main module.

This module is part of the Mail Admin Panel project.
"""

# main.py
import argparse
import asyncio
import json
import logging
import sys

from aiohttp import web

from config import AdminConfig, load
from database import create_engine, init_db
from errors import ConfigError
from models import build_metadata
from web_admin import create_app

logger = logging.getLogger(__name__)


async def create_tables(config: AdminConfig, engine=None):
    engine = engine or create_engine(config)
    try:
        await init_db(engine, build_metadata(config))
    finally:
        await engine.dispose()


def setup_logging(log_file: str, level: int = logging.INFO):
    # log to the file and the console
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Mail admin panel')
    parser.add_argument('--config', help='YAML or JSON file with setting overrides '
                                         '(default: $MAILADMIN_CONFIG)')
    parser.add_argument('--host', default='0.0.0.0')
    parser.add_argument('--port', type=int, default=3000)
    parser.add_argument('--log-file', default='mailadmin.log')
    parser.add_argument('--check', action='store_true',
                        help='validate the configuration, print it and exit')
    parser.add_argument('--init-db', action='store_true',
                        help='create any missing tables and exit')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file)

    try:
        config = load(args.config)
    except ConfigError as e:
        if e.setting:
            logger.error("Configuration error in setting '%s': %s", e.setting, e.message)
        else:
            logger.error("Configuration error: %s", e.message)
        logger.error("Refusing to start until the configuration is fixed")
        return 1

    if args.check:
        print(json.dumps(config.as_dict(redact=True), indent=2))
        return 0

    if args.init_db:
        asyncio.run(create_tables(config))
        return 0

    app = create_app(config)
    logger.info("Admin panel listening on http://%s:%s/admin/setup", args.host, args.port)
    web.run_app(app, host=args.host, port=args.port, print=None)
    return 0


if __name__ == '__main__':
    sys.exit(main())
