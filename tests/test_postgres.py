"""Tests for schema bootstrap and bulk loading, against a recording connection."""

from loan_tracker.backend import mapping as maps
from loan_tracker.backend import postgres
from loan_tracker.models import InstallmentStatus
from loan_tracker.sample import SampleDataset, fixtures


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self._result = None

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def execute(self, query: str, params=None) -> None:
        self.conn.executed.append(query)
        if query.startswith("SELECT COUNT(*) FROM "):
            table = query.removeprefix("SELECT COUNT(*) FROM ")
            self._result = (self.conn.counts.get(table, 0),)

    def executemany(self, query: str, rows) -> None:
        self.conn.batches.append((query, list(rows)))

    def fetchone(self):
        return self._result


class FakeConnection:
    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self.counts = counts or {}
        self.executed: list[str] = []
        self.batches: list[tuple[str, list]] = []

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)


def static_dataset() -> SampleDataset:
    return SampleDataset(
        companies=fixtures.companies(),
        loans=fixtures.loans(),
        installments=fixtures.installments(),
        consortiums=fixtures.consortiums(),
        users=fixtures.users(),
    )


class TestSchema:
    def test_create_schema(self) -> None:
        conn = FakeConnection()

        postgres.create_schema(conn)

        assert len(conn.executed) == 5
        assert all("CREATE TABLE IF NOT EXISTS" in statement for statement in conn.executed)

    def test_truncate_children_first(self) -> None:
        conn = FakeConnection()

        postgres.truncate(conn)

        assert conn.executed == [
            "TRUNCATE user_profiles, consortiums, installments, loans, companies CASCADE"
        ]


class TestRowValues:
    def test_enum_values_are_plain(self) -> None:
        item = fixtures.installments()[0]

        columns, values = postgres.row_values(maps.INSTALLMENTS, item)

        row = dict(zip(columns, values))
        assert row["status"] == InstallmentStatus.PAID.value
        assert type(row["status"]) is str
        assert row["loan_id"] == "loan-fgi-237"

    def test_read_only_columns_skipped(self) -> None:
        columns, _ = postgres.row_values(maps.USER_PROFILES, fixtures.users()[0])

        assert "created_at" not in columns
        assert "updated_at" not in columns


class TestLoading:
    def test_insert_records(self) -> None:
        conn = FakeConnection()

        count = postgres.insert_records(conn, maps.COMPANIES, fixtures.companies())

        query, rows = conn.batches[0]
        assert count == 3
        assert query.startswith("INSERT INTO companies (")
        assert query.endswith("ON CONFLICT (id) DO NOTHING")
        assert len(rows) == 3

    def test_insert_nothing(self) -> None:
        conn = FakeConnection()

        assert postgres.insert_records(conn, maps.LOANS, []) == 0
        assert conn.batches == []

    def test_load_dataset_parents_first(self) -> None:
        conn = FakeConnection()

        counts = postgres.load_dataset(conn, static_dataset())

        tables = [query.split()[2] for query, _ in conn.batches]
        assert tables == ["companies", "loans", "installments", "consortiums", "user_profiles"]
        assert counts == static_dataset().counts()

    def test_validate_counts(self) -> None:
        expected = static_dataset().counts()
        conn = FakeConnection(dict(expected, loans=5))

        mismatches = postgres.validate_counts(conn, expected)

        assert mismatches == ["loans: expected 6, got 5"]

    def test_validate_counts_ok(self) -> None:
        expected = static_dataset().counts()

        assert postgres.validate_counts(FakeConnection(dict(expected)), expected) == []
