"""
Database schema and management for Memory Book.
Handles application configuration.
"""
import sqlite3
import logging
from pathlib import Path
from typing import Any, Optional, Dict
from cryptography.fernet import Fernet, InvalidToken
import keyring

from src.core.viewer.settings import ViewerSettings

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "MemoryBook"


def default_data_dir() -> Path:
    return Path.home() / ".memory-book"


class DatabaseManager:
    """Manages the SQLite configuration store"""

    VERSION = "1.0.0"

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database manager

        Args:
            db_path: Path to SQLite database file. Defaults to the user data directory.
        """
        if db_path is None:
            db_path = default_data_dir() / "data.db"

        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None
        self._encryption_key: Optional[bytes] = None

    def _get_or_create_encryption_key(self) -> bytes:
        """
        Retrieve or create the encryption key from the OS credential store

        Returns:
            Fernet encryption key
        """
        if self._encryption_key is not None:
            return self._encryption_key

        key_name = "encryption_key"
        try:
            key_str = keyring.get_password(KEYRING_SERVICE, key_name)
            if key_str:
                self._encryption_key = key_str.encode()
                return self._encryption_key
        except Exception as e:
            logger.warning(f"Could not retrieve encryption key: {e}")

        key = Fernet.generate_key()
        try:
            keyring.set_password(KEYRING_SERVICE, key_name, key.decode())
        except Exception as e:
            logger.error(f"Could not store encryption key: {e}")

        self._encryption_key = key
        return key

    def _encrypt_value(self, value: str) -> str:
        f = Fernet(self._get_or_create_encryption_key())
        return f.encrypt(value.encode()).decode()

    def _decrypt_value(self, encrypted_value: str) -> Optional[str]:
        f = Fernet(self._get_or_create_encryption_key())
        try:
            return f.decrypt(encrypted_value.encode()).decode()
        except InvalidToken:
            logger.error("Stored value could not be decrypted (encryption key changed?)")
            return None

    def connect(self):
        """Establish database connection"""
        self.conn = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=30.0
        )
        self.conn.row_factory = sqlite3.Row
        self._initialize_schema()

    def _initialize_schema(self):
        """Create database schema if not exists"""
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                is_encrypted INTEGER DEFAULT 0,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()
        self._insert_defaults()

    def _insert_defaults(self):
        defaults = dict(ViewerSettings.CONFIG_DEFAULTS)
        defaults["schema_version"] = self.VERSION

        cursor = self.conn.cursor()
        for key, value in defaults.items():
            cursor.execute("""
                INSERT OR IGNORE INTO config (key, value)
                VALUES (?, ?)
            """, (key, value))
        self.conn.commit()

    def get_config(self, key: str, default: Any = None) -> Any:
        """
        Retrieve configuration value

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT value, is_encrypted FROM config WHERE key = ?
        """, (key,))

        row = cursor.fetchone()
        if row:
            value = row['value']
            if row['is_encrypted']:
                value = self._decrypt_value(value)
                if value is None:
                    return default
            return value
        return default

    def set_config(self, key: str, value: Any, encrypt: bool = False):
        """
        Set configuration value

        Args:
            key: Configuration key
            value: Configuration value
            encrypt: Whether to encrypt the value
        """
        str_value = str(value)
        if encrypt:
            str_value = self._encrypt_value(str_value)

        cursor = self.conn.cursor()
        cursor.execute("""
            INSERT OR REPLACE INTO config (key, value, is_encrypted, updated_at)
            VALUES (?, ?, ?, CURRENT_TIMESTAMP)
        """, (key, str_value, 1 if encrypt else 0))
        self.conn.commit()

    def delete_config(self, key: str):
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM config WHERE key = ?", (key,))
        self.conn.commit()

    def get_all_config(self) -> Dict[str, str]:
        """Get all configuration as dictionary (excluding encrypted values)"""
        cursor = self.conn.cursor()
        cursor.execute("""
            SELECT key, value FROM config WHERE is_encrypted = 0
        """)
        return {row['key']: row['value'] for row in cursor.fetchall()}

    def close(self):
        """Close database connection"""
        if self.conn:
            self.conn.close()
            self.conn = None
