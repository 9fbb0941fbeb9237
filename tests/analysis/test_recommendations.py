"""Tests for the refactor plan built from a snapshot's files."""

import pytest

from debt_tracker.analysis import SnapshotAnalyzer, recommend
from debt_tracker.analysis.recommendations import (
    FALLBACK_STEPS,
    priority_for,
    refactor_steps,
)
from debt_tracker.heuristics.models import FileAnalysis, FileMetrics
from debt_tracker.sources import RepoRef


def make_file(
    path,
    technical_debt=0.2,
    cognitive_debt=0.2,
    ai_likelihood=0.1,
    issues=(),
    metrics=None,
    **overrides,
):
    fields = dict(
        path=path,
        ai_likelihood=ai_likelihood,
        technical_debt=technical_debt,
        cognitive_debt=cognitive_debt,
        propagation_score=0.0,
        issues=list(issues),
        metrics=metrics or FileMetrics(),
        lines_of_code=40,
        function_count=2,
        cyclomatic_complexity=3,
        nesting_depth=1,
        ai_debt_contribution=10,
    )
    fields.update(overrides)
    return FileAnalysis(**fields)


class TestPriority:
    @pytest.mark.parametrize(
        "debt, expected",
        [(1.5, "critical"), (1.21, "critical"), (1.2, "high"), (0.71, "high"),
         (0.7, "medium"), (0.0, "medium")],
    )
    def test_thresholds_are_strict(self, debt, expected):
        assert priority_for(debt) == expected


class TestRefactorSteps:
    def test_metric_driven_steps(self):
        f = make_file("big.js", cyclomatic_complexity=22, nesting_depth=5, lines_of_code=420)
        steps = refactor_steps(f)
        assert len(steps) == 3
        assert "complexity 22" in steps[0]
        assert "from 5" in steps[1]
        assert "420 LOC" in steps[2]

    def test_issue_driven_steps(self):
        f = make_file(
            "gen.js",
            issues=["duplicate code", "overly generic naming", "missing error handling",
                    "magic numbers", "cross-file clone"],
        )
        steps = refactor_steps(f)
        assert len(steps) == 5
        assert not set(FALLBACK_STEPS) & set(steps)

    def test_related_tags_give_one_step(self):
        f = make_file("noisy.py", issues=["excessive comments", "redundant comments"])
        steps = refactor_steps(f)
        assert sum("comments" in s for s in steps) == 1

    def test_sub_score_steps(self):
        f = make_file("dense.py", metrics=FileMetrics(rdi=0.8, ccd=0.7))
        steps = refactor_steps(f)
        assert any(s.startswith("Improve readability") for s in steps)
        assert any(s.startswith("Simplify control flow") for s in steps)

    def test_fallback_when_fewer_than_two(self):
        assert refactor_steps(make_file("clean.py")) == list(FALLBACK_STEPS)
        one = refactor_steps(make_file("one.py", issues=["magic numbers"]))
        assert len(one) == 3
        assert one[1:] == list(FALLBACK_STEPS)


class TestRecommend:
    def test_ranked_by_total_score_and_capped(self):
        files = [
            make_file(f"f{i}.py", technical_debt=i / 10, ai_likelihood=0.0)
            for i in range(8)
        ]
        plan = recommend(files)
        assert [r.path for r in plan] == ["f7.py", "f6.py", "f5.py", "f4.py", "f3.py", "f2.py"]

    def test_ai_likelihood_counts_toward_rank_not_priority(self):
        files = [
            make_file("human.py", technical_debt=0.5, cognitive_debt=0.4, ai_likelihood=0.0),
            make_file("generated.js", technical_debt=0.3, cognitive_debt=0.3, ai_likelihood=0.9),
        ]
        plan = recommend(files)
        assert [r.path for r in plan] == ["generated.js", "human.py"]
        assert plan[0].priority == "medium"
        assert plan[1].priority == "high"

    def test_impact_share(self):
        files = [
            make_file("a.py", technical_debt=0.6, cognitive_debt=0.2),
            make_file("b.py", technical_debt=0.1, cognitive_debt=0.1),
            make_file("c.py", technical_debt=0.0, cognitive_debt=0.0),
        ]
        plan = recommend(files)
        assert plan[0].impact_share == pytest.approx(0.8)
        assert plan[0].impact_percent == 80
        assert plan[1].impact_percent == 20
        assert plan[2].impact_percent == 0

    def test_no_debt_at_all(self):
        plan = recommend([make_file("a.py", technical_debt=0.0, cognitive_debt=0.0)])
        assert plan[0].impact_share == 0.0

    def test_issues_carried(self):
        (rec,) = recommend([make_file("a.py", issues=["magic numbers"])])
        assert rec.issues == ["magic numbers"]

    def test_empty(self):
        assert recommend([]) == []


class TestSnapshotRecommendations:
    def test_attached_to_snapshot(self, fake_fetcher, config):
        result = SnapshotAnalyzer(fake_fetcher(), config).analyze(RepoRef("octo", "widgets"))
        assert {r.path for r in result.recommendations} == {"src/calc.py", "web/users.js"}
        assert sum(r.impact_share for r in result.recommendations) == pytest.approx(1.0)
