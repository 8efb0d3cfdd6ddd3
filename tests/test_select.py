"""Unit tests for SELECT compilation (MySQL grammar unless stated otherwise)."""
from __future__ import annotations

import threading

import pytest

from fluentsql import CompilationError, Expression, QueryBuilder, QueryBuilderError
from fluentsql.query.select import SelectQuery


def _assert_bindings_match(query: SelectQuery) -> None:
    sql, bindings = query.compile().to_tuple()
    assert sql.count("?") == len(bindings)


# ---------------------------------------------------------------------------
# Select list and FROM
# ---------------------------------------------------------------------------


class TestColumns:
    @pytest.mark.parametrize(
        "columns, expected",
        [
            (("",), "select *"),
            (([],), "select *"),
            ((), "select *"),
            (("*",), "select *"),
            ((["*"],), "select *"),
            ((["a", "b"],), "select `a`, `b`"),
            ((["a", "b as c"],), "select `a`, `b` as `c`"),
            ((["a", ["b", "c"]],), "select `a`, `b`, `c`"),
            (("a", {"b": "c"}), "select `a`, `b` as `c`"),
            (("t.*",), "select `t`.*"),
        ],
    )
    def test_select_list(self, mysql: QueryBuilder, columns, expected):
        query = mysql.select(*columns).from_("table")
        assert query.to_sql().startswith(expected)
        assert query.get_bindings() == []

    @pytest.mark.parametrize("bad", [5, {"a": 5}, {"a": ""}, [1]])
    def test_invalid_column(self, mysql: QueryBuilder, bad):
        with pytest.raises(QueryBuilderError, match="Column must be a string or key-value mapping"):
            mysql.select("a", bad)

    def test_select_replaces_previous_list(self, mysql: QueryBuilder):
        assert mysql.select("a").select("b").from_("t").to_sql() == "select `b` from `t`"

    def test_select_raw(self, mysql: QueryBuilder):
        sql = "user_id, dense_rank() over (partition department_id order by salary desc) as salary_group, ? as ext_value"
        query = mysql.select_raw(sql, [15]).from_("salaries")
        assert query.to_sql() == f"select {sql} from `salaries`"
        assert query.get_bindings() == [15]

    def test_select_raw_after_columns(self, mysql: QueryBuilder):
        query = mysql.select("id").select_raw("count(*) as n").from_("t")
        assert query.to_sql() == "select `id`, count(*) as n from `t`"

    def test_distinct(self, mysql: QueryBuilder):
        query = mysql.select("a").distinct().distinct().from_("table")
        assert query.to_sql() == "select distinct `a` from `table`"
        assert query.get_bindings() == []


class TestFrom:
    @pytest.mark.parametrize(
        "table, alias, expected",
        [
            ("table", None, "select * from `table`"),
            ("table as t", None, "select * from `table` as `t`"),
            ("table", "t", "select * from `table` as `t`"),
            ("app.users", None, "select * from `app`.`users`"),
        ],
    )
    def test_from(self, mysql: QueryBuilder, table, alias, expected):
        assert mysql.select().from_(table, alias).to_sql() == expected

    def test_table_alias_for_from(self, mysql: QueryBuilder):
        assert mysql.table("users").to_sql() == "select * from `users`"

    def test_missing_from(self, mysql: QueryBuilder):
        with pytest.raises(CompilationError, match="Missing from clause") as exc:
            mysql.select("a").to_sql()
        assert exc.value.clause == "from"

    def test_postgres_quoting(self, pgsql: QueryBuilder):
        query = pgsql.select("u.id", "u.name as n").from_("users", "u")
        assert query.to_sql() == 'select "u"."id", "u"."name" as "n" from "users" as "u"'


# ---------------------------------------------------------------------------
# WHERE
# ---------------------------------------------------------------------------


class TestWhere:
    def test_scenario_or_without_parentheses(self, mysql: QueryBuilder):
        query = mysql.select("a", "b").from_("t").where("x", 1).or_where("y", 2)
        assert query.to_sql() == "select `a`, `b` from `t` where `x` = ? or `y` = ?"
        assert query.get_bindings() == [1, 2]

    def test_scenario_between(self, mysql: QueryBuilder):
        query = mysql.select().from_("t").where_between("age", 18, 30)
        assert query.to_sql() == "select * from `t` where `age` between ? and ?"
        assert query.get_bindings() == [18, 30]

    def test_basic(self, query: SelectQuery):
        query.where("is_paid", 1).where("category", "!=", "mobile").where(
            "created_at", ">", "2025-02-12"
        ).or_where("status", "closed")
        assert query.to_sql().endswith(
            "where `is_paid` = ? and `category` != ? and (`created_at` > ? or `status` = ?)"
        )
        assert query.get_bindings() == [1, "mobile", "2025-02-12", "closed"]

    def test_nested(self, query: SelectQuery):
        query.where(
            lambda w: w.where("status", "in", [1, 2, 3, 4]).where(
                lambda w2: w2.where("force", 1).or_where("manual", True)
            )
        ).where("name", "like", "iphone%")
        assert query.to_sql().endswith(
            "where (`status` in (?, ?, ?, ?) and (`force` = ? or `manual` = ?)) and `name` like ?"
        )
        assert query.get_bindings() == [1, 2, 3, 4, 1, True, "iphone%"]

    def test_raw(self, query: SelectQuery):
        query.where_raw(
            "  status = ? and (force = ? or manual = ?) and YEAR(created_at) = ?  ",
            ["paid", 1, 1, 2025],
        )
        assert query.to_sql().endswith(
            "where status = ? and (force = ? or manual = ?) and YEAR(created_at) = ?"
        )
        assert query.get_bindings() == ["paid", 1, 1, 2025]

    def test_or_raw(self, query: SelectQuery):
        query.where("a", 1).or_where_raw("b > ?", [2])
        assert query.to_sql().endswith("where `a` = ? or b > ?")

    def test_in_and_not_in(self, query: SelectQuery):
        query.where_in("status", ["active", "pending"]).where_not_in("department", [1, 2, 3, 4])
        assert query.to_sql().endswith("where `status` in (?, ?) and `department` not in (?, ?, ?, ?)")
        assert query.get_bindings() == ["active", "pending", 1, 2, 3, 4]

    def test_or_in(self, query: SelectQuery):
        query.where_in("a", [1]).or_where_not_in("b", [2])
        assert query.to_sql().endswith("where `a` in (?) or `b` not in (?)")

    def test_between_variants(self, query: SelectQuery):
        query.where_between("created_at", "2025-01-01", "2025-12-31").where_not_between(
            "paid_at", "2025-04-01", "2025-05-01"
        )
        assert query.to_sql().endswith(
            "where `created_at` between ? and ? and `paid_at` not between ? and ?"
        )
        assert query.get_bindings() == ["2025-01-01", "2025-12-31", "2025-04-01", "2025-05-01"]

    def test_or_between(self, query: SelectQuery):
        query.where("a", 1).or_where_between("b", 1, 2).or_where_not_between("c", 3, 4)
        assert query.to_sql().endswith(
            "where `a` = ? or `b` between ? and ? or `c` not between ? and ?"
        )

    def test_empty(self, query: SelectQuery):
        query.where(lambda w: w).where_raw("")
        assert query.to_sql() == "select * from `t`"


class TestNulls:
    def test_column_only(self, query: SelectQuery):
        query.where("deleted_at")
        assert query.to_sql().endswith("where `deleted_at` is null")
        assert query.get_bindings() == []

    def test_explicit_null(self, query: SelectQuery):
        query.where("a", "=", None).where("b", "!=", None)
        assert query.to_sql().endswith("where `a` is null and `b` is not null")
        assert query.get_bindings() == []

    def test_helpers(self, query: SelectQuery):
        query.where_null("a").or_where_not_null("b").where_not_null("c").or_where_null("d")
        assert query.to_sql().endswith(
            "where (`a` is null or `b` is not null) and (`c` is not null or `d` is null)"
        )

    def test_null_as_value(self, query: SelectQuery):
        query.where("a", None)
        assert query.to_sql().endswith("where `a` is null")

    def test_lone_operator_means_null(self, query: SelectQuery):
        query.where("a", "!=").or_where("b", "=")
        assert query.to_sql().endswith("where `a` is not null or `b` is null")
        assert query.get_bindings() == []


class TestEmptyIn:
    def test_dropped_by_default(self, query: SelectQuery):
        query.where_in("id", [])
        assert query.to_sql() == "select * from `t`"
        assert query.get_bindings() == []

    def test_dropped_among_others(self, query: SelectQuery):
        query.where("a", 1).where_in("id", []).where("b", 2)
        assert query.to_sql() == "select * from `t` where `a` = ? and `b` = ?"

    def test_false_policy(self, strict_mysql: QueryBuilder):
        query = strict_mysql.table("t").where_in("id", []).or_where_not_in("pid", [])
        assert query.to_sql() == "select * from `t` where 0 = 1 or 1 = 1"


def test_or_where_on_empty_clause_matches_where(mysql: QueryBuilder):
    first = mysql.table("t").or_where("a", 1)
    second = mysql.table("t").where("a", 1)
    assert first.compile() == second.compile()


# ---------------------------------------------------------------------------
# GROUP BY / HAVING
# ---------------------------------------------------------------------------


class TestGroupBy:
    def test_deduplicated(self, query: SelectQuery):
        query.group_by("a", "b", "c").group_by("a", "b").group_by("c", "d")
        assert query.to_sql().endswith("group by `a`, `b`, `c`, `d`")

    def test_raw(self, query: SelectQuery):
        query.group_by_raw("   year(created_at), month(created_at), day(created_at)   ").group_by(
            "user_id"
        )
        assert query.to_sql().endswith(
            "group by year(created_at), month(created_at), day(created_at), `user_id`"
        )

    def test_empty(self, query: SelectQuery):
        query.group_by().group_by_raw("   ")
        assert query.to_sql() == "select * from `t`"


class TestHaving:
    def test_basic(self, query: SelectQuery):
        query.having("is_paid", 1).having("category", "!=", "mobile").having(
            "created_at", ">", "2025-02-12"
        ).or_having("status", "closed")
        assert query.to_sql().endswith(
            "having `is_paid` = ? and `category` != ? and (`created_at` > ? or `status` = ?)"
        )
        assert query.get_bindings() == [1, "mobile", "2025-02-12", "closed"]

    def test_nested(self, query: SelectQuery):
        query.having(
            lambda h: h.having("status", "in", [1, 2, 3, 4]).having(
                lambda h2: h2.having("force", 1).or_having("manual", True)
            )
        ).having("name", "like", "iphone%")
        assert query.to_sql().endswith(
            "having (`status` in (?, ?, ?, ?) and (`force` = ? or `manual` = ?)) and `name` like ?"
        )

    def test_raw(self, query: SelectQuery):
        query.having_raw("  count(user_id) > ? and YEAR(max_date) = ?", [3, 2025])
        assert query.to_sql().endswith("having count(user_id) > ? and YEAR(max_date) = ?")
        assert query.get_bindings() == [3, 2025]

    def test_or_raw(self, query: SelectQuery):
        query.having("a", 1).or_having_raw("sum(b) > ?", [2])
        assert query.to_sql().endswith("having `a` = ? or sum(b) > ?")

    def test_empty(self, query: SelectQuery):
        query.where("id", ">", 10).group_by("id").having(lambda h: h).having_raw("   ")
        assert query.to_sql().endswith("where `id` > ? group by `id`")
        assert query.get_bindings() == [10]

    def test_bindings_follow_clause_order(self, mysql: QueryBuilder):
        query = (
            mysql.select_raw("? as tag", ["x"])
            .from_("t")
            .having("n", ">", 5)
            .where("a", 1)
            .order_by_raw("field(id, ?)", [9])
        )
        assert query.to_sql() == (
            "select ? as tag from `t` where `a` = ? having `n` > ? order by field(id, ?)"
        )
        assert query.get_bindings() == ["x", 1, 5, 9]


# ---------------------------------------------------------------------------
# ORDER BY / LIMIT / OFFSET
# ---------------------------------------------------------------------------


class TestOrderBy:
    def test_basic(self, query: SelectQuery):
        query.order_by("a").order_by("b", "desc")
        assert query.to_sql().endswith("order by `a` asc, `b` desc")

    def test_override_keeps_position(self, query: SelectQuery):
        query.order_by("a").order_by("b", "desc").order_by("a", "desc")
        assert query.to_sql().endswith("order by `a` desc, `b` desc")

    def test_direction_case_insensitive(self, query: SelectQuery):
        query.order_by("a", "DESC")
        assert query.to_sql().endswith("order by `a` desc")

    def test_invalid_direction(self, query: SelectQuery):
        with pytest.raises(QueryBuilderError, match=r"Invalid direction \[up\]"):
            query.order_by("a", "up")

    def test_raw(self, query: SelectQuery):
        query.order_by_raw("  rand()   ")
        assert query.to_sql().endswith("order by rand()")

    def test_empty_raw_drops_bindings(self, query: SelectQuery):
        query.order_by_raw("   ", [1, 2, 3])
        assert query.to_sql() == "select * from `t`"
        assert query.get_bindings() == []


class TestLimitOffset:
    def test_limit(self, query: SelectQuery):
        assert query.limit(5).to_sql() == "select * from `t` limit 5"

    def test_offset(self, query: SelectQuery):
        assert query.offset(5).to_sql() == "select * from `t` offset 5"

    def test_zero_offset_is_omitted(self, query: SelectQuery):
        assert query.limit(0).offset(0).to_sql() == "select * from `t` limit 0"

    def test_negative_limit(self, query: SelectQuery):
        with pytest.raises(QueryBuilderError, match="Limit must be greater than 0") as exc:
            query.limit(-5)
        assert exc.value.argument == "limit"

    def test_negative_offset(self, query: SelectQuery):
        with pytest.raises(QueryBuilderError, match="Offset must be greater than 0"):
            query.offset(-5)

    @pytest.mark.parametrize("value", [2.5, "5", True, None])
    def test_non_integer_limit(self, query: SelectQuery, value):
        with pytest.raises(QueryBuilderError, match="Limit must be an integer") as exc:
            query.limit(value)
        assert exc.value.argument == "limit"

    @pytest.mark.parametrize("value", [1.0, "0", False])
    def test_non_integer_offset(self, query: SelectQuery, value):
        with pytest.raises(QueryBuilderError, match="Offset must be an integer") as exc:
            query.offset(value)
        assert exc.value.argument == "offset"


# ---------------------------------------------------------------------------
# Memoisation and invariants
# ---------------------------------------------------------------------------


class TestCompilation:
    def test_deterministic(self, mysql: QueryBuilder):
        query = mysql.table("t").where("a", 1).where_in("b", [1, 2])
        assert query.compile().to_tuple() == query.compile().to_tuple()
        assert query.to_sql() == query.to_sql()

    def test_memoised_after_first_compile(self, query: SelectQuery):
        query.where("a", 1)
        first = query.compile()
        query.where("b", 2)
        assert query.compile() is first
        assert query.to_sql() == "select * from `t` where `a` = ?"

    def test_concurrent_compile_returns_single_value(self, mysql: QueryBuilder):
        query = mysql.table("t").where("a", 1)
        results: list[Expression] = []

        def worker() -> None:
            results.append(query.compile())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert all(result is results[0] for result in results)

    def test_query_without_compiler(self):
        with pytest.raises(CompilationError, match="No compiler configured"):
            SelectQuery().from_("t").to_sql()

    def test_explicit_compiler(self, mysql: QueryBuilder):
        query = SelectQuery().from_("t")
        assert query.compile(mysql.compiler).sql == "select * from `t`"

    def test_binding_order_invariant(self, mysql: QueryBuilder):
        query = (
            mysql.select_raw("?", [0])
            .from_("t")
            .join("u", lambda j: j.on("t.id", "u.t_id").where("u.k", 1))
            .where("a", 2)
            .or_where(lambda w: w.where_in("b", [3, 4]).where_between("c", 5, 6))
            .group_by_raw("f(?)", [7])
            .having("n", ">", 8)
            .order_by_raw("g(?)", [9])
        )
        _assert_bindings_match(query)
        assert query.get_bindings() == [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]

    def test_edge_cases(self, mysql: QueryBuilder):
        query = (
            mysql.select(["id", "name"])
            .from_("users")
            .where_raw("age > ?", [18])
            .where_raw("")
            .where("status", "active")
            .join("profiles")
            .group_by("country", "city")
            .order_by("name")
            .order_by("id", "desc")
            .limit(10)
            .offset(5)
            .union(lambda q: q.select("id", "name").from_("admin").where("role", "super"))
            .union_all(lambda q: q.from_("guests"))
        )
        sql = query.to_sql()
        assert "select `id`, `name` from `users`" in sql
        assert "where age > ? and `status` = ?" in sql
        assert "group by `country`, `city`" in sql
        assert "order by `name` asc, `id` desc" in sql
        assert "limit 10 offset 5" in sql
        assert "union all (select * from `guests`)" in sql
        assert query.get_bindings() == [18, "active", "super"]
