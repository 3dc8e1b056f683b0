"""
Transaction Log

Append-only sinks for executed trades. The trade engine only emits
Transaction records; these classes decide where they are kept.

- InMemoryTransactionLog: list-backed, for tests and short sessions
- SQLiteTransactionLog: one row per trade in a trade_transactions table,
  with the full record JSON-encoded in the details column
"""

import json
import logging
import sqlite3
from datetime import date
from pathlib import Path
from typing import Iterator, List, Protocol

from transactions.models import Transaction


class TransactionLog(Protocol):
    """Anything that can store and replay transactions"""

    def append(self, transaction: Transaction) -> None:
        ...

    def __iter__(self) -> Iterator[Transaction]:
        ...

    def __len__(self) -> int:
        ...


class InMemoryTransactionLog:
    """List-backed transaction log."""

    def __init__(self):
        self._transactions: List[Transaction] = []
        self.logger = logging.getLogger(__name__)

    def append(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)
        self.logger.debug(f"Logged {transaction.description} [{transaction.transaction_id}]")

    def for_team(self, team_id: str) -> List[Transaction]:
        return [t for t in self._transactions if t.involves(team_id)]

    def on_date(self, day: date) -> List[Transaction]:
        return [t for t in self._transactions if t.date == day]

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    def __len__(self) -> int:
        return len(self._transactions)


class SQLiteTransactionLog:
    """
    SQLite-backed transaction log.

    Features:
    - Append-only trade_transactions table, created on first use
    - Indexed by team, partner and date for history queries
    - JSON storage for players and analysis

    Example:
        >>> log = SQLiteTransactionLog("data/trades.db")
        >>> log.append(transaction)
        >>> [t.description for t in log.for_team("BOS")]
        ['[CPU] Boston ↔ Denver']
    """

    def __init__(self, database_path: str = "data/database/trade_engine.db"):
        """
        Initialize the log and create its table if needed.

        Args:
            database_path: Path to SQLite database
        """
        self.database_path = database_path
        self.logger = logging.getLogger(__name__)
        Path(database_path).parent.mkdir(parents=True, exist_ok=True)
        self._create_table()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.database_path)

    def _create_table(self) -> None:
        conn = self._connect()
        try:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS trade_transactions (
                    transaction_id TEXT PRIMARY KEY,
                    transaction_date TEXT NOT NULL,
                    transaction_type TEXT NOT NULL,
                    initiated_by TEXT NOT NULL,
                    team_id TEXT NOT NULL,
                    partner_team_id TEXT NOT NULL,
                    description TEXT NOT NULL,
                    details TEXT NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            conn.execute(
                'CREATE INDEX IF NOT EXISTS idx_trade_transactions_team '
                'ON trade_transactions(team_id, transaction_date)'
            )
            conn.execute(
                'CREATE INDEX IF NOT EXISTS idx_trade_transactions_partner '
                'ON trade_transactions(partner_team_id, transaction_date)'
            )
            conn.commit()
        finally:
            conn.close()

    def append(self, transaction: Transaction) -> None:
        """
        Insert a transaction.

        Raises:
            sqlite3.Error: If database operation fails (including a duplicate id)
        """
        conn = self._connect()
        try:
            conn.execute('''
                INSERT INTO trade_transactions (
                    transaction_id, transaction_date, transaction_type,
                    initiated_by, team_id, partner_team_id,
                    description, details
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                transaction.transaction_id,
                transaction.date.isoformat(),
                transaction.transaction_type.value,
                transaction.initiated_by.value,
                transaction.team_id,
                transaction.partner_team_id,
                transaction.description,
                json.dumps(transaction.to_dict(), ensure_ascii=False),
            ))
            conn.commit()

            self.logger.info(
                f"Logged {transaction.description} on {transaction.date.isoformat()} "
                f"[transaction_id: {transaction.transaction_id}]"
            )

        except sqlite3.Error as e:
            conn.rollback()
            self.logger.error(
                f"Error inserting transaction: {e} "
                f"[id: {transaction.transaction_id}, teams: {transaction.team_ids}]"
            )
            raise
        finally:
            conn.close()

    def _query(self, where: str = "", params: tuple = ()) -> List[Transaction]:
        conn = self._connect()
        try:
            rows = conn.execute(
                f'SELECT details FROM trade_transactions {where} '
                f'ORDER BY transaction_date, rowid',
                params
            ).fetchall()
        finally:
            conn.close()
        return [Transaction.from_dict(json.loads(row[0])) for row in rows]

    def for_team(self, team_id: str) -> List[Transaction]:
        return self._query('WHERE team_id = ? OR partner_team_id = ?', (team_id, team_id))

    def on_date(self, day: date) -> List[Transaction]:
        return self._query('WHERE transaction_date = ?', (day.isoformat(),))

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._query())

    def __len__(self) -> int:
        conn = self._connect()
        try:
            return conn.execute('SELECT COUNT(*) FROM trade_transactions').fetchone()[0]
        finally:
            conn.close()
