"""
Configuration Manager for the trigger demo
Handles environment variables and database credentials
"""

import os
import logging
from dotenv import load_dotenv
from cryptography.fernet import Fernet

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

DEFAULT_DRIVER = "MySQL ODBC 8.0 Unicode Driver"


def read_encrypted_password(password_path: str, key_path: str) -> str:
    """
    Reads a Fernet key from a text file and uses it to decrypt the stored password.

    Raises:
        FileNotFoundError: If the password or key file is missing.
        cryptography.fernet.InvalidToken: If decryption fails.
    """
    with open(key_path, "r") as f:
        key = f.read().strip().encode()
    fernet = Fernet(key)
    with open(password_path, "rb") as f:
        encrypted = f.read()

    return fernet.decrypt(encrypted).decode()


class DatabaseConfig:
    """Database configuration handler"""

    def __init__(self):
        """Initialize database configuration from environment variables"""
        self.driver = os.getenv('DB_DRIVER', DEFAULT_DRIVER)
        self.server = os.getenv('DB_SERVER', 'localhost')
        self.database = os.getenv('DB_DATABASE', 'hh-trigger-voorbeeld')
        self.username = os.getenv('DB_USERNAME', 'hartigehap')
        self.password = self._load_password()

    def _load_password(self):
        password_path = os.getenv('DB_PASSWORD_PATH')
        key_path = os.getenv('DB_PASSWORD_KEY_PATH')
        if password_path and key_path:
            try:
                return read_encrypted_password(password_path, key_path)
            except Exception as e:
                logger.error(f"Failed to decrypt SQL password: {e}")
                return None
        return os.getenv('DB_PASSWORD', 'wachtwoord')

    def validate(self) -> bool:
        """
        Validate that all required database configuration is present.

        Returns:
            True if all required fields are present, False otherwise
        """
        required_fields = {
            'driver': self.driver,
            'server': self.server,
            'database': self.database,
            'username': self.username,
            'password': self.password
        }

        missing_fields = [field for field, value in required_fields.items() if not value]

        if missing_fields:
            logger.error(f"Missing database configuration: {', '.join(missing_fields)}")
            if 'password' in missing_fields:
                logger.error("Password error - please check DB_PASSWORD or DB_PASSWORD_PATH and DB_PASSWORD_KEY_PATH")
            else:
                logger.error("Please check your .env file or environment variables")
            return False

        return True

    def get_connection_string(self) -> str:
        """
        Build and return the ODBC connection string.

        Returns:
            Formatted connection string

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.validate():
            raise ValueError("Invalid database configuration")

        connection_string = (
            f"DRIVER={{{self.driver}}};"
            f"SERVER={self.server};"
            f"DATABASE={self.database};"
            f"UID={self.username};"
            f"PWD={self.password};"
        )

        return connection_string

    def __repr__(self):
        return (
            f"DatabaseConfig(driver={self.driver!r}, server={self.server!r}, "
            f"database={self.database!r}, username={self.username!r})"
        )


def validate_config(config: DatabaseConfig = None) -> bool:
    """
    Validate the database configuration.

    Returns:
        True if configuration is valid
    """
    return (config or DatabaseConfig()).validate()
