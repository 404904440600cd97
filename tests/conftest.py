"""Shared test fixtures for surveylens tests."""

from __future__ import annotations

import pytest

from surveylens.config import SurveyLensSettings
from surveylens.models import Row, SurveyResponse


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SURVEYLENS_* variables from the developer's shell out of tests."""
    for name in (
        "SURVEYLENS_ISSUE_THRESHOLD",
        "SURVEYLENS_EXCELLENT_THRESHOLD",
        "SURVEYLENS_SCALE_MIN",
        "SURVEYLENS_SCALE_MAX",
        "SURVEYLENS_LOG_DIR",
        "SURVEYLENS_LOG_LEVEL",
        "SURVEYLENS_PROJECT_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> SurveyLensSettings:
    return SurveyLensSettings(
        issue_threshold=3.0,
        excellent_threshold=4.0,
        scale_min=1,
        scale_max=5,
    )


def _make_responses(
    answers: list[dict[str, float]], departments: list[str] | None = None
) -> list[SurveyResponse]:
    depts = departments or [""] * len(answers)
    return [
        SurveyResponse(respondent_id=f"r{i + 1}", department=dept, answers=a)
        for i, (a, dept) in enumerate(zip(answers, depts))
    ]


@pytest.fixture
def make_responses():
    """Factory: build responses with ids r1, r2, ... from answer dicts."""
    return _make_responses


# Frequency-distribution table as parsed from a Japanese survey export:
# header row, label row, then one row per question.
_FREQUENCY_HEADERS = [
    "事前アンケート",
    "__EMPTY",
    "5",
    "4",
    "3",
    "2",
    "1",
    "__EMPTY_1",
    "__EMPTY_2",
    "点",
]


@pytest.fixture
def frequency_headers() -> list[str]:
    return list(_FREQUENCY_HEADERS)


@pytest.fixture
def frequency_rows() -> list[Row]:
    return [
        {
            "事前アンケート": "番号",
            "__EMPTY": "質問",
            "5": "そう思う",
            "4": "少しそう思う",
            "3": "どちらでもない",
            "2": "あまりそう思わない",
            "1": "そう思わない",
            "__EMPTY_1": "無回答",
            "__EMPTY_2": "総数",
            "点": "加重平均値",
        },
        {
            "事前アンケート": 1,
            "__EMPTY": "仕事にやりがいを感じている",
            "5": 6,
            "4": 16,
            "3": 23,
            "2": 17,
            "1": 2,
            "__EMPTY_1": 2,
            "__EMPTY_2": 66,
            "点": 3.1,
        },
        {
            "事前アンケート": 2,
            "__EMPTY": "上司との関係は良好である",
            "5": 10,
            "4": 20,
            "3": 10,
            "2": 5,
            "1": 5,
            "__EMPTY_1": 0,
            "__EMPTY_2": 50,
            "点": 3.5,
        },
    ]


_RESPONDENT_HEADERS = ["回答者ID", "部署", "Q1_仕事のやりがい", "Q2_職場環境"]


@pytest.fixture
def respondent_headers() -> list[str]:
    return list(_RESPONDENT_HEADERS)


@pytest.fixture
def respondent_rows() -> list[Row]:
    return [
        {"回答者ID": "001", "部署": "営業部", "Q1_仕事のやりがい": "4", "Q2_職場環境": "5"},
        {"回答者ID": "002", "部署": "営業部", "Q1_仕事のやりがい": "2", "Q2_職場環境": "3"},
        {"回答者ID": "003", "部署": "開発部", "Q1_仕事のやりがい": "5", "Q2_職場環境": "4"},
        {"回答者ID": "004", "部署": "開発部", "Q1_仕事のやりがい": "3"},
    ]
