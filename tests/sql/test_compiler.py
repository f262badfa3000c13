"""Tests for condition, sort-key and projection translation (recordkit.sql.compiler)."""

import pytest
from sqlalchemy import Column, DateTime, Integer, MetaData, Table, Text, select
from sqlalchemy.dialects import sqlite

from recordkit import And, Cond, Or, QueryError, Raw
from recordkit.sql.compiler import (
    compile_condition,
    compile_conditions,
    order_key,
    projection,
    split_key,
)


@pytest.fixture
def table() -> Table:
    return Table(
        "birthdays",
        MetaData(),
        Column("id", Integer, primary_key=True),
        Column("name", Text),
        Column("born", DateTime),
    )


def sql(clause) -> str:
    return str(clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))


class TestSplitKey:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("id", ("id", None)),
            ("id <=", ("id", "<=")),
            ("  name   LIKE ", ("name", "like")),
            ("name NOT   IN", ("name", "not in")),
        ],
    )
    def test_split(self, key, expected):
        assert split_key(key) == expected

    def test_empty_key(self):
        with pytest.raises(QueryError):
            split_key("   ")


class TestCond:
    def test_equality(self, table):
        assert sql(compile_condition(table, Cond(id=1))) == "birthdays.id = 1"

    @pytest.mark.parametrize(
        ("key", "fragment"),
        [
            ("id =", "birthdays.id = 2"),
            ("id ==", "birthdays.id = 2"),
            ("id !=", "birthdays.id != 2"),
            ("id <>", "birthdays.id != 2"),
            ("id <", "birthdays.id < 2"),
            ("id <=", "birthdays.id <= 2"),
            ("id >", "birthdays.id > 2"),
            ("id >=", "birthdays.id >= 2"),
        ],
    )
    def test_comparison_operators(self, table, key, fragment):
        assert sql(compile_condition(table, Cond({key: 2}))) == fragment

    def test_like(self, table):
        assert sql(compile_condition(table, Cond({"name like": "K%"}))) == "birthdays.name LIKE 'K%'"

    def test_not_like(self, table):
        compiled = sql(compile_condition(table, Cond({"name not like": "K%"})))
        assert compiled == "birthdays.name NOT LIKE 'K%'"

    def test_list_value_means_in(self, table):
        compiled = sql(compile_condition(table, Cond(id=[1, 3])))
        assert compiled == "birthdays.id IN (1, 3)"

    def test_explicit_in_and_not_in(self, table):
        assert "IN (1, 2)" in sql(compile_condition(table, Cond({"id in": (1, 2)})))
        assert "NOT IN (1, 2)" in sql(compile_condition(table, Cond({"id not in": [1, 2]})))

    def test_none_means_is_null(self, table):
        assert sql(compile_condition(table, Cond(born=None))) == "birthdays.born IS NULL"

    def test_is_not(self, table):
        compiled = sql(compile_condition(table, Cond({"born is not": None})))
        assert compiled == "birthdays.born IS NOT NULL"

    def test_several_keys_are_a_conjunction(self, table):
        compiled = sql(compile_condition(table, Cond({"id >": 1, "name": "Ken Thompson"})))
        assert "birthdays.id > 1" in compiled
        assert "birthdays.name = 'Ken Thompson'" in compiled
        assert " AND " in compiled

    def test_plain_dict_accepted(self, table):
        assert sql(compile_condition(table, {"id": 3})) == "birthdays.id = 3"

    def test_unknown_column(self, table):
        with pytest.raises(QueryError) as exc_info:
            compile_condition(table, Cond(age=30))
        assert exc_info.value.context.column == "age"
        assert exc_info.value.context.collection == "birthdays"

    def test_unknown_operator(self, table):
        with pytest.raises(QueryError, match="Unsupported operator"):
            compile_condition(table, Cond({"id ~": 1}))


class TestCompound:
    def test_or(self, table):
        compiled = sql(compile_condition(table, Or(Cond(id=1), Cond(id=3))))
        assert compiled == "birthdays.id = 1 OR birthdays.id = 3"

    def test_and(self, table):
        compiled = sql(compile_condition(table, And(Cond({"id >": 1}), Cond({"id <": 3}))))
        assert "birthdays.id > 1" in compiled
        assert "birthdays.id < 3" in compiled

    def test_nested(self, table):
        condition = And(Cond(name="Ken Thompson"), Or(Cond(id=1), Cond(id=3)))
        compiled = sql(compile_condition(table, condition))
        assert "birthdays.name = 'Ken Thompson'" in compiled
        assert "(birthdays.id = 1 OR birthdays.id = 3)" in compiled

    def test_raw(self, table):
        clause = compile_condition(table, Raw("id > :n", n=1))
        assert sql(clause) == "id > 1"

    def test_sqlalchemy_clause_passes_through(self, table):
        clause = table.c.id == 2
        assert compile_condition(table, clause) is clause

    def test_unsupported_type(self, table):
        with pytest.raises(QueryError, match="Unsupported condition type int"):
            compile_condition(table, 42)

    def test_compile_conditions_keeps_order(self, table):
        compiled = compile_conditions(table, [Cond(id=1), Cond(name="x")])
        assert [sql(c) for c in compiled] == ["birthdays.id = 1", "birthdays.name = 'x'"]


class TestSortAndProjection:
    def test_descending(self, table):
        assert sql(order_key(table, "-born")) == "birthdays.born DESC"

    @pytest.mark.parametrize("key", ["born", "+born", " born "])
    def test_ascending(self, table, key):
        assert sql(order_key(table, key)) == "birthdays.born ASC"

    def test_raw_sort(self, table):
        assert sql(order_key(table, Raw("name COLLATE NOCASE"))) == "name COLLATE NOCASE"

    def test_raw_with_params_rejected(self, table):
        with pytest.raises(QueryError):
            order_key(table, Raw("id > :n", n=1))

    def test_unknown_sort_column(self, table):
        with pytest.raises(QueryError):
            order_key(table, "-age")

    def test_projection(self, table):
        stmt = select(projection(table, "name"), projection(table, Raw("count(*) AS total")))
        compiled = sql(stmt)
        assert compiled.startswith("SELECT birthdays.name, count(*) AS total")
