"""Tests for the Supabase key-value store."""

from dataclasses import dataclass, field

from food_track.adapters.supabase_kv_store import SupabaseKeyValueStore
from food_track.services.storage import MealStore
from tests.conftest import make_food, make_meal


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    rows: dict[tuple[str, str], dict[str, object]] = field(default_factory=dict)
    last_on_conflict: str | None = None
    _action: str = "select"
    _payload: dict[str, object] | None = None
    _filters: dict[str, object] = field(default_factory=dict)

    def select(self, *_args) -> "FakeTable":
        self._start("select")
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._start("upsert")
        self._payload = payload
        self.last_on_conflict = on_conflict
        return self

    def delete(self) -> "FakeTable":
        self._start("delete")
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._filters[column] = value
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self._action == "upsert" and self._payload is not None:
            key = (str(self._payload["namespace"]), str(self._payload["key"]))
            self.rows[key] = dict(self._payload)
            return FakeResponse(data=[self._payload])
        key = (str(self._filters.get("namespace")), str(self._filters.get("key")))
        if self._action == "delete":
            removed = self.rows.pop(key, None)
            return FakeResponse(data=[removed] if removed else [])
        row = self.rows.get(key)
        return FakeResponse(data=[{"value": row["value"]}] if row else [])

    def _start(self, action: str) -> None:
        self._action = action
        self._payload = None
        self._filters = {}


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name)
        return self.tables[name]


def test_set_get_and_remove() -> None:
    client = FakeSupabaseClient()
    store = SupabaseKeyValueStore(client, namespace="alice")  # type: ignore[arg-type]

    assert store.get("meals") is None

    store.set("meals", [{"id": "m1"}])
    assert store.get("meals") == [{"id": "m1"}]
    assert client.tables["kv_store"].last_on_conflict == "namespace,key"
    assert "updated_at" in client.tables["kv_store"].rows[("alice", "meals")]

    store.remove("meals")
    assert store.get("meals") is None


def test_namespaces_are_isolated() -> None:
    client = FakeSupabaseClient()
    alice = SupabaseKeyValueStore(client, namespace="alice")  # type: ignore[arg-type]
    bob = SupabaseKeyValueStore(client, namespace="bob")  # type: ignore[arg-type]

    alice.set("daily_calorie_goal", 1800)

    assert alice.get("daily_calorie_goal") == 1800
    assert bob.get("daily_calorie_goal") is None


def test_meal_store_over_supabase() -> None:
    store = SupabaseKeyValueStore(FakeSupabaseClient())  # type: ignore[arg-type]
    meal_store = MealStore(store)
    meal = make_meal([make_food("a", quantity=150)])

    assert meal_store.save_meals([meal]) is True
    assert meal_store.get_meals() == [meal]
