"""
In-memory stand-in for the Supabase client used by the API tests.

Implements the subset of the PostgREST query builder the services use:
table/select/insert/update/delete, the eq/neq/in_/ilike/gt/gte/lt/lte/is_/or_
filters, order/limit/offset/range, and count="exact".
"""

import copy
import itertools
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

PRIMARY_KEYS = {
    "user_": "id_user",
    "company": "id_company",
    "job_offer": "id_job_offer",
    "message": "id_message",
    "filter": "id_filter",
}

UNIQUE_KEYS = {
    "user_": [("email",)],
    "company": [("recruiter_mail",)],
    "apply": [("id_user", "id_job_offer")],
    "revoked_token": [("jti",)],
}

CREATED_AT_TABLES = ("user_", "company", "filter")


class FakeAPIError(Exception):
    def __init__(self, message: str, code: str = ""):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResult:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None):
        self.data = data
        self.count = count


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _equal(left: Any, right: Any) -> bool:
    # PostgREST casts the filter value to the column type; text stays case-sensitive
    if left == right:
        return True
    if left is None or right is None:
        return False
    if isinstance(left, bool):
        return str(left).lower() == str(right).lower()
    return str(left) == str(right)


def _like_regex(pattern: str) -> "re.Pattern":
    parts = []
    for char in str(pattern):
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def _compare(left: Any, right: Any) -> Optional[int]:
    if left is None:
        return None
    try:
        if isinstance(left, (int, float)) and not isinstance(right, (int, float)):
            right = float(right)
        return (left > right) - (left < right)
    except TypeError:
        left, right = str(left), str(right)
        return (left > right) - (left < right)


def _ilike(value: Any, pattern: str) -> bool:
    return value is not None and bool(_like_regex(pattern).match(str(value)))


def _parse_or(expression: str) -> Callable[[Dict[str, Any]], bool]:
    clauses = []
    for clause in expression.split(","):
        column, operator, value = clause.split(".", 2)
        clauses.append((column, operator, value))

    def predicate(row: Dict[str, Any]) -> bool:
        for column, operator, value in clauses:
            if operator == "eq" and _equal(row.get(column), value):
                return True
            if operator == "neq" and not _equal(row.get(column), value):
                return True
            if operator == "ilike" and _ilike(row.get(column), value):
                return True
        return False

    return predicate


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns: Optional[List[str]] = None
        self.count_mode: Optional[str] = None
        self.payload: Any = None
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.orders: List[Tuple[str, bool]] = []
        self.limit_value: Optional[int] = None
        self.offset_value: int = 0

    # operations

    def select(self, columns: str = "*", count: Optional[str] = None) -> "FakeQuery":
        self.operation = "select"
        self.count_mode = count
        if columns.strip() != "*":
            self.columns = [c.strip() for c in columns.split(",") if c.strip()]
        return self

    def insert(self, data: Any) -> "FakeQuery":
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data: Dict[str, Any]) -> "FakeQuery":
        self.operation = "update"
        self.payload = data
        return self

    def delete(self) -> "FakeQuery":
        self.operation = "delete"
        return self

    # filters

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: _equal(row.get(column), value))
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: not _equal(row.get(column), value))
        return self

    def in_(self, column: str, values: List[Any]) -> "FakeQuery":
        values = list(values)
        self.filters.append(lambda row: any(_equal(row.get(column), v) for v in values))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(lambda row: _ilike(row.get(column), pattern))
        return self

    def gt(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: (_compare(row.get(column), value) or 0) > 0)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: _compare(row.get(column), value) in (0, 1))
        return self

    def lt(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: _compare(row.get(column), value) == -1)
        return self

    def lte(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: _compare(row.get(column), value) in (0, -1))
        return self

    def is_(self, column: str, value: Any) -> "FakeQuery":
        expected = None if value in (None, "null") else value
        self.filters.append(lambda row: row.get(column) is expected or _equal(row.get(column), expected))
        return self

    def or_(self, expression: str) -> "FakeQuery":
        self.filters.append(_parse_or(expression))
        return self

    # modifiers

    def order(self, column: str, desc: bool = False, **kwargs) -> "FakeQuery":
        self.orders.append((column, desc))
        return self

    def limit(self, size: int) -> "FakeQuery":
        self.limit_value = size
        return self

    def offset(self, size: int) -> "FakeQuery":
        self.offset_value = size
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.offset_value = start
        self.limit_value = end - start + 1
        return self

    # execution

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self.db.rows(self.table_name) if all(f(row) for f in self.filters)]

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns is None:
            return copy.deepcopy(row)
        return {column: copy.deepcopy(row.get(column)) for column in self.columns}

    def execute(self) -> FakeResult:
        self.db.calls.append((self.table_name, self.operation))
        if self.table_name in self.db.failing_tables:
            raise FakeAPIError(f"connection to {self.table_name} failed", code="08006")
        if self.operation == "insert":
            return FakeResult(self.db.insert(self.table_name, self.payload))
        if self.operation == "update":
            rows = self._matching()
            for row in rows:
                row.update(copy.deepcopy(self.payload))
            return FakeResult([copy.deepcopy(row) for row in rows])
        if self.operation == "delete":
            rows = self._matching()
            self.db.tables[self.table_name] = [r for r in self.db.rows(self.table_name) if r not in rows]
            return FakeResult([copy.deepcopy(row) for row in rows])

        rows = self._matching()
        for column, desc in reversed(self.orders):
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0),
                      reverse=desc)
        total = len(rows)
        rows = rows[self.offset_value:]
        limit = self.limit_value
        if self.db.max_rows is not None:
            limit = self.db.max_rows if limit is None else min(limit, self.db.max_rows)
        if limit is not None:
            rows = rows[:limit]
        count = total if self.count_mode == "exact" else None
        return FakeResult([self._project(row) for row in rows], count)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failing_tables: set = set()
        self.calls: List[Tuple[str, str]] = []
        # PostgREST db-max-rows: caps returned rows, never the exact count
        self.max_rows: Optional[int] = None
        self._ids = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def insert(self, table: str, payload: Any) -> List[Dict[str, Any]]:
        records = payload if isinstance(payload, list) else [payload]
        inserted = []
        for record in records:
            row = copy.deepcopy(record)
            primary_key = PRIMARY_KEYS.get(table)
            if primary_key and row.get(primary_key) is None:
                row[primary_key] = next(self._ids)
            if table in CREATED_AT_TABLES:
                row.setdefault("created_at", _now())
            for columns in UNIQUE_KEYS.get(table, []):
                if any(all(_equal(existing.get(c), row.get(c)) for c in columns) for existing in self.rows(table)):
                    raise FakeAPIError(
                        f'duplicate key value violates unique constraint on {table}({", ".join(columns)})',
                        code="23505",
                    )
            self.rows(table).append(row)
            inserted.append(copy.deepcopy(row))
        return inserted
