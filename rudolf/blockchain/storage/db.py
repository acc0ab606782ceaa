import sqlite3
import threading
from typing import Optional, Dict, List


class StorageDB:
    def __init__(self, db_path: str):
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.cursor = self.conn.cursor()
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._lock:
            # State table: Key-Value store for token state
            self.cursor.execute('''
                CREATE TABLE IF NOT EXISTS state (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            ''')
            # Journal of committed calls, in execution order
            self.cursor.execute('''
                CREATE TABLE IF NOT EXISTS calls (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    call_hash TEXT,
                    call_type TEXT,
                    block_time INTEGER,
                    data TEXT
                )
            ''')
            self.conn.commit()

    # --- State Methods ---
    def get_state(self, key: str) -> Optional[str]:
        with self._lock:
            self.cursor.execute('SELECT value FROM state WHERE key = ?', (key,))
            row = self.cursor.fetchone()
            return row[0] if row else None

    def save_state(self, key: str, value: str, journal_entry: Optional[Dict[str, str]] = None):
        """Writes a state value and its journal entry in one transaction."""
        with self._lock:
            self.cursor.execute('INSERT OR REPLACE INTO state (key, value) VALUES (?, ?)', (key, value))
            if journal_entry:
                self.cursor.execute(
                    'INSERT INTO calls (call_hash, call_type, block_time, data) VALUES (?, ?, ?, ?)',
                    (journal_entry["call_hash"], journal_entry["call_type"],
                     int(journal_entry["block_time"]), journal_entry["data"])
                )
            self.conn.commit()

    # --- Call Journal ---
    def get_calls(self, limit: int = 100) -> List[Dict[str, str]]:
        """Returns the most recent committed calls, newest first."""
        with self._lock:
            self.cursor.execute(
                'SELECT seq, call_hash, call_type, block_time, data FROM calls ORDER BY seq DESC LIMIT ?',
                (limit,)
            )
            return [
                {"seq": row[0], "call_hash": row[1], "call_type": row[2], "block_time": row[3], "data": row[4]}
                for row in self.cursor.fetchall()
            ]

    def count_calls(self) -> int:
        with self._lock:
            self.cursor.execute('SELECT COUNT(*) FROM calls')
            return self.cursor.fetchone()[0]

    def close(self):
        with self._lock:
            self.conn.close()
