"""Sample per-respondent survey, for trying the tool without real data."""

from __future__ import annotations

import csv
import io
import random

SAMPLE_QUESTIONS = [
    "Q1_仕事のやりがい",
    "Q2_職場環境",
    "Q3_給与待遇",
    "Q4_上司との関係",
    "Q5_成長機会",
    "Q6_経営方針",
    "Q7_チームワーク",
    "Q8_福利厚生",
]
SAMPLE_DEPARTMENTS = ["営業部", "開発部", "人事部", "総務部", "企画部"]


def generate_sample_csv(rows: int = 50, rng: random.Random | None = None) -> str:
    """CSV text with a respondent id, a department and eight 1–5 answers per row."""
    if rng is None:
        rng = random.Random()
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["回答者ID", "部署", *SAMPLE_QUESTIONS])
    for i in range(1, rows + 1):
        dept = rng.choice(SAMPLE_DEPARTMENTS)
        scores = [rng.randint(1, 5) for _ in SAMPLE_QUESTIONS]
        writer.writerow([f"{i:03d}", dept, *scores])
    return buffer.getvalue()
