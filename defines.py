from dataclasses import dataclass
from enum import Enum
from typing import Optional

from database_utils import Statement

ORDER_TABLE = "bestelling"
ORDER_LINE_TABLE = "bestelregel"

# Status values known to the database triggers
STATUS_OPEN = "OPEN"
STATUS_READY = "GEREED"
STATUS_CANCELLED = "GEANNULEERD"


class Outcome(Enum):
    SUCCEED = "succeed"
    FAIL = "fail"


@dataclass(frozen=True)
class ScriptStep:
    description: str
    statement: Statement
    expected: Outcome = Outcome.SUCCEED
    table: Optional[str] = None  # header for printed result sets

    @property
    def expects_success(self) -> bool:
        return self.expected is Outcome.SUCCEED


SELECT_ORDERS = "SELECT * FROM bestelling"
INSERT_ORDER = "INSERT INTO bestelling (TafelNummer) VALUES (?)"
INSERT_ORDER_WITH_STATUS = "INSERT INTO bestelling (TafelNummer, Status) VALUES (?, ?)"
UPDATE_ORDER_LINE_STATUS = "UPDATE bestelregel SET Status = ? WHERE Barcode = ?"
SELECT_ORDER_LINES = "SELECT * FROM bestelregel"

# Order matters: later steps read data written by earlier ones
DEMO_SCRIPT = [
    ScriptStep(
        "Show all orders",
        Statement(SELECT_ORDERS),
        table=ORDER_TABLE,
    ),
    ScriptStep(
        "Add an order for table 1, which already has an open order",
        Statement(INSERT_ORDER, (1,)),
        expected=Outcome.FAIL,
    ),
    ScriptStep(
        "Add an order for table 5, which has no open order",
        Statement(INSERT_ORDER, (5,)),
    ),
    ScriptStep(
        "Show all orders again",
        Statement(SELECT_ORDERS),
        table=ORDER_TABLE,
    ),
    ScriptStep(
        "Add an order that does not start as OPEN",
        Statement(INSERT_ORDER_WITH_STATUS, (3, STATUS_CANCELLED)),
        expected=Outcome.FAIL,
    ),
    ScriptStep(
        "Mark order line 10000002 as ready (OPEN > GEREED)",
        Statement(UPDATE_ORDER_LINE_STATUS, (STATUS_READY, "10000002")),
    ),
    ScriptStep(
        "Show all order lines",
        Statement(SELECT_ORDER_LINES),
        table=ORDER_LINE_TABLE,
    ),
]
