from __future__ import annotations

import unittest

from dbaccess import (
    MissingParameterError,
    ParameterTranslator,
    parse_named_sql,
    to_argument_matrix,
    to_argument_vector,
    to_positional_form,
)


class PositionalFormTests(unittest.TestCase):
    def test_named_placeholders_become_markers(self) -> None:
        sql = "SELECT * FROM t WHERE a = :a AND b = :b"
        self.assertEqual(to_positional_form(sql), "SELECT * FROM t WHERE a = ? AND b = ?")

    def test_format_marker_and_percent_escaping(self) -> None:
        sql = "SELECT * FROM t WHERE name LIKE 'ab%' AND id = :id"
        self.assertEqual(
            to_positional_form(sql, "%s"),
            "SELECT * FROM t WHERE name LIKE 'ab%%' AND id = %s",
        )

    def test_template_without_placeholders_is_unchanged(self) -> None:
        sql = "SELECT 1"
        self.assertEqual(to_positional_form(sql), sql)
        self.assertEqual(to_argument_vector(sql, {"unused": 1}), [])

    def test_quoted_text_comments_and_casts_are_not_placeholders(self) -> None:
        sql = (
            "SELECT ':skip' AS a, \":also\" AS b, c::text -- :comment\n"
            "FROM t /* :block */ WHERE d = :d"
        )
        parsed = parse_named_sql(sql)

        self.assertEqual(parsed.names, ("d",))
        self.assertEqual(parsed.placeholder_count, 1)
        self.assertEqual(
            to_positional_form(sql),
            "SELECT ':skip' AS a, \":also\" AS b, c::text -- :comment\n"
            "FROM t /* :block */ WHERE d = ?",
        )

    def test_colon_not_followed_by_identifier_is_kept(self) -> None:
        self.assertEqual(to_positional_form("SELECT a[1:2], :x"), "SELECT a[1:2], ?")


class ArgumentVectorTests(unittest.TestCase):
    def test_vector_follows_occurrence_order_not_mapping_order(self) -> None:
        sql = "UPDATE t SET b = :b, c = :c WHERE a = :a"
        params = {"a": 1, "c": 3, "b": 2}
        self.assertEqual(to_argument_vector(sql, params), [2, 3, 1])

    def test_repeated_name_takes_one_slot_per_occurrence(self) -> None:
        sql = "SELECT * FROM t WHERE a = :a OR b = :b OR c = :a"
        self.assertEqual(to_positional_form(sql), "SELECT * FROM t WHERE a = ? OR b = ? OR c = ?")
        self.assertEqual(to_argument_vector(sql, {"a": "x", "b": "y"}), ["x", "y", "x"])

    def test_none_values_are_bound(self) -> None:
        self.assertEqual(to_argument_vector("VALUES (:a, :b)", {"a": None, "b": 0}), [None, 0])

    def test_missing_parameter_raises(self) -> None:
        sql = "SELECT * FROM t WHERE a = :a AND b = :b"
        with self.assertRaises(MissingParameterError) as ctx:
            to_argument_vector(sql, {"a": 1})

        self.assertEqual(ctx.exception.name, "b")
        self.assertEqual(ctx.exception.sql, sql)
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertIn("'b'", str(ctx.exception))


class ArgumentMatrixTests(unittest.TestCase):
    def test_matrix_keeps_list_order(self) -> None:
        sql = "INSERT INTO t (a, b) VALUES (:a, :b)"
        rows = [{"b": 2, "a": 1}, {"a": 3, "b": 4}, {"b": 6, "a": 5}]
        self.assertEqual(to_argument_matrix(sql, rows), [[1, 2], [3, 4], [5, 6]])

    def test_empty_list_gives_empty_matrix(self) -> None:
        self.assertEqual(to_argument_matrix("VALUES (:a)", []), [])

    def test_omission_in_any_row_raises(self) -> None:
        sql = "INSERT INTO t (a, b) VALUES (:a, :b)"
        with self.assertRaises(MissingParameterError) as ctx:
            to_argument_matrix(sql, [{"a": 1, "b": 2}, {"a": 3}])
        self.assertEqual(ctx.exception.name, "b")


class ParameterTranslatorTests(unittest.TestCase):
    def test_translate_returns_sql_and_vector_together(self) -> None:
        translator = ParameterTranslator("%s")
        sql, args = translator.translate("SELECT * FROM t WHERE id = :id AND x = :x", {"x": 9, "id": 1})

        self.assertEqual(sql, "SELECT * FROM t WHERE id = %s AND x = %s")
        self.assertEqual(args, [1, 9])

    def test_translate_batch(self) -> None:
        translator = ParameterTranslator()
        sql, matrix = translator.translate_batch("VALUES (:a)", [{"a": 1}, {"a": 2}])

        self.assertEqual(sql, "VALUES (?)")
        self.assertEqual(matrix, [[1], [2]])


if __name__ == "__main__":
    unittest.main()
