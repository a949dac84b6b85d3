"""
Trigger Demo Script
===================

Description:
    Shows how database triggers and constraints surface in application code.
    The script connects to the demo database and runs a fixed sequence of
    statements against the bestelling (order) and bestelregel (order line)
    tables. Some of the writes are expected to be rejected by the database:

    - A second open order for the same table number.
    - A new order that does not start with status OPEN.

    Every statement's SQL text is printed before it runs, result sets are
    printed as tab separated column/value pairs, and rejected statements are
    printed as 'Exception: <message>'. A failing step never stops the script.

Usage:
    python trigger_demo.py

    Connection settings come from environment variables or a .env file
    (see config_manager.py). Set LOG_LEVEL=INFO or DEBUG for more detail.
"""
import os
import logging

from config_manager import DatabaseConfig
from database_utils import QueryRunner
from defines import DEMO_SCRIPT

logger = logging.getLogger(__name__)


def main():
    """Run the demo script once"""
    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'WARNING').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    config = DatabaseConfig()
    logger.debug(f"Loaded {config}")
    QueryRunner(config).run(DEMO_SCRIPT)


if __name__ == "__main__":
    main()
