"""Tests for per-respondent tables: column roles, responses and questions."""

from __future__ import annotations

import pytest

from surveylens.normalize import (
    RespondentTable,
    build_respondent_table,
    convert_to_responses,
    default_chain,
    generate_questions,
    normalize,
)
from surveylens.normalize.respondent import question_label
from surveylens.normalize.shapes import cell_text, is_text, to_count, to_number

# ---------------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------------


class TestToNumber:
    @pytest.mark.parametrize(
        ("cell", "expected"),
        [(4, 4.0), (3.5, 3.5), ("4", 4.0), (" 2.5 ", 2.5), ("1e1", 10.0)],
    )
    def test_numbers(self, cell, expected: float) -> None:
        assert to_number(cell) == pytest.approx(expected)

    @pytest.mark.parametrize("cell", [None, "", "  ", "abc", "nan", "inf", True, "4,5", "1,234", "1_000"])
    def test_not_numbers(self, cell) -> None:
        assert to_number(cell) is None


class TestToCount:
    def test_thousands_separator(self) -> None:
        assert to_count("1,234") == pytest.approx(1234.0)

    def test_plain_count(self) -> None:
        assert to_count(12) == pytest.approx(12.0)

    @pytest.mark.parametrize("cell", [None, "", "abc", "1_000"])
    def test_not_counts(self, cell) -> None:
        assert to_count(cell) is None


class TestCellHelpers:
    def test_is_text(self) -> None:
        assert is_text("仕事にやりがい", 5)
        assert not is_text("短い", 5)
        assert not is_text("123456", 5)
        assert not is_text(123456, 5)

    def test_cell_text(self) -> None:
        assert cell_text(None) == ""
        assert cell_text(1.0) == "1"
        assert cell_text(1.5) == "1.5"
        assert cell_text(" 営業部 ") == "営業部"


# ---------------------------------------------------------------------------
# Column roles
# ---------------------------------------------------------------------------


class TestBuildRespondentTable:
    def test_japanese_headers(self, respondent_headers, respondent_rows) -> None:
        table = build_respondent_table(respondent_headers, respondent_rows).table
        assert table.respondent_id_column == "回答者ID"
        assert table.department_column == "部署"
        assert table.question_columns == ["Q1_仕事のやりがい", "Q2_職場環境"]
        assert table.source_shape == "respondent"

    def test_english_headers(self) -> None:
        table = build_respondent_table(["Department", "Respondent ID", "Q1"], []).table
        assert table.respondent_id_column == "Respondent ID"
        assert table.department_column == "Department"
        assert table.question_columns == ["Q1"]

    def test_department_like_id_is_not_respondent_column(self) -> None:
        table = build_respondent_table(["Dept ID", "ID", "Q1"], []).table
        assert table.respondent_id_column == "ID"
        assert table.department_column == "Dept ID"

    def test_falls_back_to_first_column(self) -> None:
        table = build_respondent_table(["name", "score1", "score2"], []).table
        assert table.respondent_id_column == "name"
        assert table.department_column == ""
        assert table.question_columns == ["score1", "score2"]

    def test_id_inside_word_does_not_match(self) -> None:
        table = build_respondent_table(["No.", "Validity", "Q1"], []).table
        assert table.respondent_id_column == "No."


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------


class TestConvertToResponses:
    def test_one_response_per_row(self, respondent_headers, respondent_rows) -> None:
        table = build_respondent_table(respondent_headers, respondent_rows).table
        responses = convert_to_responses(table)
        assert [r.respondent_id for r in responses] == ["001", "002", "003", "004"]
        assert [r.department for r in responses] == ["営業部", "営業部", "開発部", "開発部"]
        assert responses[0].answers == {"Q1_仕事のやりがい": 4.0, "Q2_職場環境": 5.0}

    def test_blank_and_non_numeric_answers_absent(self) -> None:
        rows = [
            {"回答者ID": "001", "部署": "営業部", "Q1": "4", "Q2": ""},
            {"回答者ID": 2, "Q1": "abc", "Q2": 5},
        ]
        table = build_respondent_table(["回答者ID", "部署", "Q1", "Q2"], rows).table
        first, second = convert_to_responses(table)
        assert first.answers == {"Q1": 4.0}
        assert second.answers == {"Q2": 5.0}
        assert second.respondent_id == "2"
        assert second.department == ""

    def test_comma_decimal_answer_absent(self) -> None:
        rows = [{"ID": "1", "Q1_仕事": "4,5"}, {"ID": "2", "Q1_仕事": "3"}]
        table = build_respondent_table(["ID", "Q1_仕事"], rows).table
        first, second = convert_to_responses(table)
        assert first.answers == {}
        assert second.answers == {"Q1_仕事": 3.0}

    def test_no_department_column(self) -> None:
        table = build_respondent_table(["name", "Q1"], [{"name": "a", "Q1": 3}]).table
        [response] = convert_to_responses(table)
        assert response.department == ""


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


class TestQuestionLabel:
    @pytest.mark.parametrize(
        ("column", "label"),
        [
            ("Q1_仕事のやりがい", "仕事のやりがい"),
            ("Q10 Team spirit", "Team spirit"),
            ("q3_pay", "pay"),
            ("Overall", "Overall"),
            ("Q5", "Q5"),
        ],
    )
    def test_prefix_stripped(self, column: str, label: str) -> None:
        assert question_label(column) == label


class TestGenerateQuestions:
    def test_one_question_per_column(self, respondent_headers, respondent_rows) -> None:
        table = build_respondent_table(respondent_headers, respondent_rows).table
        questions = generate_questions(table, 1, 5)
        assert [q.key for q in questions] == ["Q1_仕事のやりがい", "Q2_職場環境"]
        assert [q.label for q in questions] == ["仕事のやりがい", "職場環境"]
        assert [q.category_id for q in questions] == ["cat-5", "cat-1"]
        assert all((q.scale_min, q.scale_max) == (1, 5) for q in questions)

    def test_unique_ids(self, respondent_headers, respondent_rows) -> None:
        table = build_respondent_table(respondent_headers, respondent_rows).table
        questions = generate_questions(table, 1, 5)
        assert len({q.id for q in questions}) == 2


# ---------------------------------------------------------------------------
# Detector chain
# ---------------------------------------------------------------------------


class TestDetectorChain:
    def test_respondent_table_is_the_fallback(self, respondent_headers, respondent_rows) -> None:
        result = normalize(respondent_headers, respondent_rows)
        assert isinstance(result, RespondentTable)
        assert result.kind == "respondent"

    def test_frequency_detector_runs_first(self, frequency_headers, frequency_rows) -> None:
        chain = default_chain()
        assert [d.name for d in chain.detectors] == ["frequency", "respondent"]
        assert chain.run(frequency_headers, frequency_rows).kind == "frequency"

    def test_empty_table(self) -> None:
        result = normalize([], [])
        assert isinstance(result, RespondentTable)
        assert result.table.rows == []
