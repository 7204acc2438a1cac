import sqlite3

import pytest

from jetorm.transaction import IsolationLevel, TransactionError, Tx, TxOptions


class _Cursor:
    def __init__(self, owner):
        self._owner = owner

    def execute(self, query):
        if self._owner.fail:
            raise RuntimeError("boom")
        self._owner.statements.append(query)

    def close(self):
        pass


class _RecordingConnection:
    def __init__(self, fail=False):
        self.fail = fail
        self.statements = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return _Cursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def _count(conn):
    return conn.execute("SELECT COUNT(*) FROM items").fetchone()[0]


@pytest.fixture
def sqlite_conn():
    conn = sqlite3.connect(":memory:", isolation_level=None)
    conn.execute("CREATE TABLE items (name TEXT)")
    yield conn
    conn.close()


def test_isolation_level_sql_names_are_distinct():
    names = {level.to_sql() for level in IsolationLevel}
    assert len(names) == len(IsolationLevel)
    assert IsolationLevel.SERIALIZABLE.to_sql() == "SERIALIZABLE"


def test_tx_options_defaults_use_first_isolation_level():
    options = TxOptions()
    assert options.isolation is IsolationLevel.READ_UNCOMMITTED
    assert options.read_only is False


def test_nil_transaction_commit_raises():
    with pytest.raises(TransactionError, match="transaction is nil"):
        Tx(None).commit()


def test_nil_transaction_rollback_raises():
    with pytest.raises(TransactionError, match="transaction is nil"):
        Tx(None).rollback()


def test_nil_transaction_savepoint_raises():
    with pytest.raises(TransactionError, match="transaction is nil"):
        Tx(None).savepoint("sp")


def test_savepoint_statements_are_issued():
    conn = _RecordingConnection()
    tx = Tx(conn)
    tx.savepoint("sp1")
    tx.rollback_to("sp1")
    tx.release_savepoint("sp1")
    assert conn.statements == [
        "SAVEPOINT sp1",
        "ROLLBACK TO SAVEPOINT sp1",
        "RELEASE SAVEPOINT sp1",
    ]
    assert tx.savepoints == frozenset()


def test_unknown_savepoint_raises():
    tx = Tx(_RecordingConnection())
    with pytest.raises(TransactionError, match="savepoint missing does not exist"):
        tx.rollback_to("missing")
    with pytest.raises(TransactionError, match="savepoint missing does not exist"):
        tx.release_savepoint("missing")


def test_released_savepoint_is_forgotten():
    tx = Tx(_RecordingConnection())
    tx.savepoint("sp")
    assert "sp" in tx.savepoints
    tx.release_savepoint("sp")
    with pytest.raises(TransactionError):
        tx.rollback_to("sp")


def test_failing_execute_is_wrapped():
    tx = Tx(_RecordingConnection(fail=True))
    with pytest.raises(TransactionError, match="failed to create savepoint sp") as info:
        tx.savepoint("sp")
    assert isinstance(info.value.__cause__, RuntimeError)
    assert tx.savepoints == frozenset()


def test_rollback_to_savepoint_with_sqlite(sqlite_conn):
    sqlite_conn.execute("BEGIN")
    tx = Tx(sqlite_conn)
    sqlite_conn.execute("INSERT INTO items VALUES ('kept')")
    tx.savepoint("sp1")
    sqlite_conn.execute("INSERT INTO items VALUES ('dropped')")
    tx.rollback_to("sp1")
    tx.commit()
    assert _count(sqlite_conn) == 1


def test_context_manager_commits(sqlite_conn):
    sqlite_conn.execute("BEGIN")
    with Tx(sqlite_conn):
        sqlite_conn.execute("INSERT INTO items VALUES ('a')")
    sqlite_conn.execute("BEGIN")
    sqlite_conn.execute("ROLLBACK")
    assert _count(sqlite_conn) == 1


def test_context_manager_rolls_back_on_error(sqlite_conn):
    sqlite_conn.execute("BEGIN")
    with pytest.raises(KeyError):
        with Tx(sqlite_conn):
            sqlite_conn.execute("INSERT INTO items VALUES ('a')")
            raise KeyError("stop")
    assert _count(sqlite_conn) == 0


def test_context_manager_on_recording_connection():
    conn = _RecordingConnection()
    with Tx(conn):
        pass
    with pytest.raises(ValueError):
        with Tx(conn):
            raise ValueError("x")
    assert (conn.commits, conn.rollbacks) == (1, 1)