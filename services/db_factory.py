"""
This module provides a factory for creating database service instances based on configuration.
"""
import logging
from typing import Dict, Any
from services.db_implementations.db_interface import DatabaseInterface
from services.db_implementations.sqlite_implementation import SQLiteDBService

logger = logging.getLogger(__name__)

def create_db_service(config: Dict[str, Any], read_only: bool = False) -> DatabaseInterface:
    """
    Create and return the appropriate database service based on configuration.

    Args:
        config (Dict[str, Any]): Configuration dictionary containing database settings.
        read_only (bool): If True, create database in read-only mode.

    Returns:
        DatabaseInterface: An instance of the appropriate database service.

    Raises:
        ValueError: If the database type is not supported.
    """
    # Handle both normalized (lowercase) and raw (uppercase) section names
    database_section = config.get("database") or config.get("Database")
    if not database_section:
        raise ValueError("Database configuration section not found")

    db_type = database_section.get("type", "sqlite").lower()

    if db_type == "sqlite":
        sqlite_section = config.get("sqlite") or config.get("SQLite")
        if not sqlite_section or not sqlite_section.get("db_file"):
            raise ValueError("SQLite configuration requires db_file")
        logger.debug(f"Creating SQLite service for {sqlite_section['db_file']}")
        return SQLiteDBService(sqlite_section["db_file"], read_only=read_only)

    raise ValueError(f"Unsupported database type: {db_type}")
