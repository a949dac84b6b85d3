"""
Database utilities for the trigger demo
Runs SQL statements through pyodbc and prints result sets to the console
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from config_manager import DatabaseConfig
from errors import CloseError, DatabaseConnectionError, DriverLoadError, QueryError

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """SQL text plus its positional (qmark) parameters."""
    sql: str
    params: Tuple[Any, ...] = ()

    @property
    def placeholder_count(self) -> int:
        return self.sql.count("?")

    def validate(self):
        """
        Check the parameters against the placeholders before the statement is sent.

        Raises:
            QueryError: On a count mismatch or a parameter that is not int or str
        """
        if len(self.params) != self.placeholder_count:
            raise QueryError(
                f"Statement expects {self.placeholder_count} parameter(s), got {len(self.params)}"
            )
        for position, value in enumerate(self.params, start=1):
            # bool is an int subclass but is not a valid integer parameter here
            if isinstance(value, bool) or not isinstance(value, (int, str)):
                raise QueryError(
                    f"Parameter {position} has unsupported type {type(value).__name__}"
                )


@dataclass
class StepResult:
    """What happened when one script step ran."""
    step: Any
    succeeded: bool
    row_count: int = 0
    error: Optional[Exception] = None

    @property
    def matched_expectation(self) -> bool:
        return self.succeeded == self.step.expects_success


def release(resource, name: str = "resource") -> bool:
    """
    Best-effort close of a single database handle.

    Errors are logged at debug level and never raised.

    Returns:
        True if the handle was closed (or there was nothing to close), False otherwise
    """
    if resource is None:
        return True
    try:
        resource.close()
        return True
    except Exception as e:
        error = CloseError(f"Failed to close {name}: {e}")
        logger.debug(str(error))
        return False


def pyodbc_connect(config: DatabaseConfig):
    """Open an autocommit pyodbc connection for the given config."""
    # needs unixODBC at import time
    import pyodbc
    return pyodbc.connect(config.get_connection_string(), autocommit=True)


def pyodbc_drivers() -> List[str]:
    """Names of the ODBC drivers installed on this machine."""
    import pyodbc
    return pyodbc.drivers()


def format_value(value) -> str:
    if value is None:
        return "null"
    return str(value)


class QueryRunner:
    """
    Runs a fixed script of statements against one database session.
    Handles are owned by the caller and passed in explicitly.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None,
                 connect_factory: Optional[Callable[[DatabaseConfig], Any]] = None,
                 list_drivers: Optional[Callable[[], List[str]]] = None):
        self.config = config or DatabaseConfig()
        self.connect_factory = connect_factory or pyodbc_connect
        self.list_drivers = list_drivers or pyodbc_drivers

    def load_driver(self) -> str:
        """
        Make sure the configured ODBC driver is installed.

        Returns:
            The driver name

        Raises:
            DriverLoadError: If the driver is not available
        """
        try:
            drivers = self.list_drivers()
        except Exception as e:
            raise DriverLoadError(f"Unable to load the ODBC driver manager: {e}") from e

        if self.config.driver not in drivers:
            raise DriverLoadError(f"ODBC driver not found: {self.config.driver}")

        logger.info(f"Using ODBC driver {self.config.driver}")
        return self.config.driver

    def connect(self):
        """
        Establish the database session.

        Returns:
            An open DB-API connection

        Raises:
            DatabaseConnectionError: If the config is invalid or the server refuses
        """
        try:
            connection = self.connect_factory(self.config)
        except Exception as e:
            raise DatabaseConnectionError(str(e)) from e
        logger.info("Database connection established successfully")
        return connection

    def execute(self, connection, sql: str, params: Tuple[Any, ...] = ()):
        """
        Execute one statement with positional parameters.

        Returns:
            An open cursor when the statement produced rows, otherwise the affected row count

        Raises:
            QueryError: If the database rejects the statement
        """
        statement = Statement(sql, tuple(params))
        statement.validate()
        if connection is None:
            raise QueryError("No active database connection")

        cursor = None
        try:
            cursor = connection.cursor()
            if statement.params:
                cursor.execute(statement.sql, statement.params)
            else:
                cursor.execute(statement.sql)
        except Exception as e:
            release(cursor, "statement")
            logger.error(f"Query execution failed: {e}")
            logger.error(f"Query: {statement.sql}")
            raise QueryError(str(e)) from e

        if cursor.description is not None:
            return cursor

        affected = cursor.rowcount
        release(cursor, "statement")
        logger.info(f"Statement executed successfully, {affected} row(s) affected")
        return affected

    def print_result_set(self, result_set, table: str) -> int:
        """
        Print every row of the result set as tab separated column/value pairs.
        The result set is consumed.

        Returns:
            Number of rows printed
        """
        columns = [column[0] for column in result_set.description]
        print(f"\nTable: {table}")

        count = 0
        for row in result_set:
            print("".join(f"{name}: {format_value(value)}\t" for name, value in zip(columns, row)))
            count += 1
        return count

    def close(self, connection, result_set=None, statement=None):
        """Release the result set, then the statement, then the connection. Never raises."""
        release(result_set, "result set")
        release(statement, "statement")
        release(connection, "connection")

    def run_step(self, connection, step) -> StepResult:
        statement = step.statement
        print(statement.sql)
        if statement.params:
            logger.debug(f"Parameters: {statement.params}")

        cursor = None
        try:
            result = self.execute(connection, statement.sql, statement.params)
            if isinstance(result, int):
                step_result = StepResult(step, True, row_count=result)
            else:
                cursor = result
                rows = self.print_result_set(cursor, step.table)
                step_result = StepResult(step, True, row_count=rows)
        except Exception as e:
            print(f"Exception: {e}")
            step_result = StepResult(step, False, error=e)
        finally:
            release(cursor, "result set")

        if not step_result.matched_expectation:
            logger.warning(
                f"Step '{step.description}' {'succeeded' if step_result.succeeded else 'failed'}"
                f" but was expected to {step.expected.value}"
            )
        print()
        return step_result

    def run(self, steps) -> List[StepResult]:
        """
        Run the whole script once: driver check, connect, every step, close.
        A failing step never stops the steps after it.
        """
        try:
            self.load_driver()
            print("Successfully found the database driver")
        except DriverLoadError as e:
            print(f"Exception: {e}")
            logger.error(f"Driver check failed: {e}")

        connection = None
        try:
            connection = self.connect()
            print("Successfully connected to the database")
        except DatabaseConnectionError as e:
            print(f"Exception: {e}")
            logger.error(f"Failed to connect to database: {e}")
        print()

        results = []
        try:
            for step in steps:
                results.append(self.run_step(connection, step))
        finally:
            self.close(connection)
            logger.info("Database connection closed")

        failed = sum(1 for r in results if not r.matched_expectation)
        logger.info(f"Script finished: {len(results)} step(s), {failed} unexpected outcome(s)")
        return results
