import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from config_manager import DatabaseConfig  # noqa: E402
from database_utils import QueryRunner  # noqa: E402

# Stand-in for the demo database: the business rules live in triggers,
# the same way the real server enforces them.
SCHEMA = """
CREATE TABLE bestelling (
  ID INTEGER PRIMARY KEY AUTOINCREMENT,
  TafelNummer INTEGER NOT NULL,
  Status TEXT NOT NULL DEFAULT 'OPEN'
);
CREATE TABLE bestelregel (
  Barcode TEXT PRIMARY KEY,
  BestellingID INTEGER NOT NULL REFERENCES bestelling(ID),
  Status TEXT NOT NULL DEFAULT 'OPEN'
);

INSERT INTO bestelling (TafelNummer, Status) VALUES (1, 'OPEN');
INSERT INTO bestelling (TafelNummer, Status) VALUES (2, 'BETAALD');
INSERT INTO bestelregel (Barcode, BestellingID, Status) VALUES ('10000001', 1, 'GEREED');
INSERT INTO bestelregel (Barcode, BestellingID, Status) VALUES ('10000002', 1, 'OPEN');

CREATE TRIGGER bestelling_one_open_per_table BEFORE INSERT ON bestelling
WHEN EXISTS (SELECT 1 FROM bestelling WHERE TafelNummer = NEW.TafelNummer AND Status = 'OPEN')
BEGIN
  SELECT RAISE(ABORT, 'Er staat al een open bestelling voor deze tafel');
END;

CREATE TRIGGER bestelling_starts_open BEFORE INSERT ON bestelling
WHEN NEW.Status <> 'OPEN'
BEGIN
  SELECT RAISE(ABORT, 'Een nieuwe bestelling moet status OPEN hebben');
END;

CREATE TRIGGER bestelregel_status_transition BEFORE UPDATE OF Status ON bestelregel
WHEN NOT ((OLD.Status = 'OPEN' AND NEW.Status = 'GEREED')
       OR (OLD.Status = 'GEREED' AND NEW.Status = 'GESERVEERD'))
BEGIN
  SELECT RAISE(ABORT, 'Ongeldige statusovergang');
END;
"""


@pytest.fixture()
def db_path(tmp_path):
    path = tmp_path / "trigger_demo_test.db"
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def connect_sqlite(db_path):
    def _connect(config):
        return sqlite3.connect(db_path, isolation_level=None)
    return _connect


@pytest.fixture()
def config(monkeypatch):
    for name in ("DB_DRIVER", "DB_SERVER", "DB_DATABASE", "DB_USERNAME",
                 "DB_PASSWORD", "DB_PASSWORD_PATH", "DB_PASSWORD_KEY_PATH"):
        monkeypatch.delenv(name, raising=False)
    return DatabaseConfig()


@pytest.fixture()
def runner(config, connect_sqlite):
    return QueryRunner(config, connect_factory=connect_sqlite, list_drivers=lambda: [config.driver])


@pytest.fixture()
def conn(db_path):
    c = sqlite3.connect(db_path, isolation_level=None)
    yield c
    c.close()
