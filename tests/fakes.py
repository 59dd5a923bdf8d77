"""
In-memory stand-ins for the supabase client and the Gemini wrapper.

``FakeSupabase`` implements the subset of the PostgREST query builder the
services use: select/insert/update/delete, eq/neq/in_/is_/or_ filters,
order/range/limit, maybe_single, rpc and auth.get_user.
"""

import asyncio
import copy
import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

from postgrest.exceptions import APIError

Row = Dict[str, Any]
Predicate = Callable[[Row], bool]

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _split_top_level(expr: str) -> List[str]:
    parts, depth, current = [], 0, ""
    quoted = escaped = False
    for ch in expr:
        if escaped:
            escaped = False
        elif quoted and ch == "\\":
            escaped = True
        elif ch == '"':
            quoted = not quoted
        elif not quoted and ch == "(":
            depth += 1
        elif not quoted and ch == ")":
            depth -= 1
        if ch == "," and depth == 0 and not quoted:
            parts.append(current)
            current = ""
        else:
            current += ch
    parts.append(current)
    return [p for p in parts if p]


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _clause(clause: str) -> Predicate:
    column, rest = clause.split(".", 1)
    negate = rest.startswith("not.")
    if negate:
        rest = rest[len("not."):]
    op, value = rest.split(".", 1)
    value = _unquote(value)
    if op == "is":
        def pred(row):
            return row.get(column) is None if value == "null" else str(row.get(column)).lower() == value
    elif op == "in":
        values = value.strip("()").split(",")

        def pred(row):
            return str(row.get(column)) in values
    elif op == "ilike":
        needle = value.strip("%").lower()

        def pred(row):
            return needle in str(row.get(column) or "").lower()
    elif op == "eq":
        def pred(row):
            return str(row.get(column)) == value
    else:
        raise ValueError(f"Unsupported filter operator: {op}")
    if negate:
        return lambda row: not pred(row)
    return pred


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.count_mode: Optional[str] = None
        self.filters: List[Predicate] = []
        self.orders: List[tuple] = []
        self.window: Optional[tuple] = None
        self.max_rows: Optional[int] = None
        self.single_row = False

    # Operations

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.op = "select"
        self.count_mode = count
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def is_(self, column, value):
        self.filters.append(lambda row: row.get(column) is None if value in (None, "null") else row.get(column) == value)
        return self

    def or_(self, expr: str):
        clauses = [_clause(c) for c in _split_top_level(expr)]
        self.filters.append(lambda row: any(c(row) for c in clauses))
        return self

    # Modifiers

    def order(self, column, desc: bool = False):
        self.orders.append((column, desc))
        return self

    def range(self, start: int, end: int):
        self.window = (start, end)
        return self

    def limit(self, n: int):
        self.max_rows = n
        return self

    def maybe_single(self):
        self.single_row = True
        return self

    def single(self):
        self.single_row = True
        return self

    # Execution

    def _matching(self) -> List[Row]:
        return [row for row in self.db.rows(self.table) if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.queries.append((self.table, self.op))
        failure = self.db.failures.get((self.table, self.op))
        if failure is not None:
            raise failure
        if self.op == "insert":
            return self._execute_insert()
        if self.op == "update":
            return self._execute_update()
        if self.op == "delete":
            return self._execute_delete()
        return self._execute_select()

    def _execute_select(self):
        rows = self._matching()
        for column, desc in reversed(self.orders):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            # Postgres puts NULLs last ascending, first descending
            rows = missing + present if desc else present + missing
        count = len(rows) if self.count_mode else None
        if self.window is not None:
            start, end = self.window
            rows = rows[start:end + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        rows = copy.deepcopy(rows)
        if self.single_row:
            if not rows:
                return None
            return SimpleNamespace(data=rows[0], count=count)
        return SimpleNamespace(data=rows, count=count)

    def _execute_insert(self):
        records = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for record in records:
            row = dict(record)
            self.db.check_unique(self.table, row)
            row.setdefault("id", self.db.next_id(self.table))
            row.setdefault("created_at", self.db.tick())
            self.db.rows(self.table).append(row)
            inserted.append(copy.deepcopy(row))
        return SimpleNamespace(data=inserted, count=None)

    def _execute_update(self):
        updated = []
        for row in self._matching():
            candidate = {**row, **self.payload}
            self.db.check_unique(self.table, candidate, exclude_id=row.get("id"))
            row.update(copy.deepcopy(self.payload))
            updated.append(copy.deepcopy(row))
        return SimpleNamespace(data=updated, count=None)

    def _execute_delete(self):
        doomed = self._matching()
        table = self.db.rows(self.table)
        for row in doomed:
            table.remove(row)
        return SimpleNamespace(data=copy.deepcopy(doomed), count=None)


class FakeRpc:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        if self.db.rpc_error is not None:
            raise self.db.rpc_error
        return SimpleNamespace(data=None, count=None)


class FakeAuth:
    def __init__(self, db: "FakeSupabase"):
        self.db = db

    def get_user(self, jwt: Optional[str] = None):
        user = self.db.users.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=SimpleNamespace(
            id=user["id"],
            email=user.get("email"),
            user_metadata=user.get("user_metadata", {}),
            app_metadata=user.get("app_metadata", {}),
        ))


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Row]] = {}
        self.ids: Dict[str, int] = {}
        self.unique: Dict[str, List[str]] = {}
        self.failures: Dict[tuple, Exception] = {}
        self.queries: List[tuple] = []
        self.rpc_calls: List[tuple] = []
        self.rpc_error: Optional[Exception] = None
        self.users: Dict[str, Dict[str, Any]] = {}
        self.auth = FakeAuth(self)
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Dict[str, Any]) -> FakeRpc:
        return FakeRpc(self, name, params)

    # Helpers for tests

    def rows(self, table: str) -> List[Row]:
        return self.tables.setdefault(table, [])

    def next_id(self, table: str) -> int:
        self.ids[table] = self.ids.get(table, 0) + 1
        return self.ids[table]

    def tick(self) -> str:
        self._clock += 1
        return (_EPOCH + timedelta(seconds=self._clock)).isoformat()

    def seed(self, table: str, *records: Row) -> List[Row]:
        """Insert rows directly, bypassing the services"""
        return self.table(table).insert([dict(r) for r in records]).execute().data

    def check_unique(self, table: str, row: Row, exclude_id: Any = None) -> None:
        for column in self.unique.get(table, []):
            for existing in self.rows(table):
                if existing.get("id") == exclude_id:
                    continue
                if row.get(column) is not None and existing.get(column) == row.get(column):
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{table}_{column}_key"',
                        "details": None,
                        "hint": None,
                    })


class FakeGemini:
    """Drop-in for GeminiClient; returns queued responses in order"""

    def __init__(self, configured: bool = True, model: str = "gemini-test"):
        self.configured = configured
        self.model = model
        self.responses: List[Any] = []
        self.prompts: List[str] = []
        # Calls made on a thread that is running an event loop (they would block it)
        self.event_loop_calls = 0

    @property
    def is_configured(self) -> bool:
        return self.configured

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def _record_thread(self) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self.event_loop_calls += 1

    def generate(self, prompt: str) -> str:
        self._record_thread()
        self.prompts.append(prompt)
        if not self.responses:
            raise RuntimeError("No fake Gemini response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def list_models(self) -> List[Dict[str, Any]]:
        self._record_thread()
        return [{"name": "models/gemini-test", "displayName": "Gemini Test", "supportedActions": ["generateContent"]}]
