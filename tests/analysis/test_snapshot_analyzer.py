"""Tests for snapshot orchestration over a repository source."""

import pytest

from debt_tracker.analysis import SnapshotAnalyzer, analyze_records, summarize_files
from debt_tracker.config import TrackerConfig
from debt_tracker.exceptions import EmptyResultError
from debt_tracker.graph import EdgeKind
from debt_tracker.heuristics import FileRecord, analyze_file
from debt_tracker.sources import RepoRef

REF = RepoRef("octo", "widgets")


class TestAnalyzeRecords:
    def test_order_independent_of_workers(self, clean_python, generated_js):
        records = [
            FileRecord("a.py", clean_python),
            FileRecord("b.js", generated_js),
            FileRecord("c.js", generated_js),
        ]
        serial = analyze_records(records, workers=1)
        parallel = analyze_records(records, workers=3)
        assert [f.path for f in parallel] == ["a.py", "b.js", "c.js"]
        assert serial == parallel

    def test_each_file_compared_to_others(self, generated_js):
        records = [FileRecord("b.js", generated_js), FileRecord("c.js", generated_js)]
        assert all("cross-file clone" in f.issues for f in analyze_records(records))

    def test_single_file_skips_cross_file(self, generated_js):
        (analysis,) = analyze_records([FileRecord("b.js", generated_js)])
        assert "cross-file clone" not in analysis.issues

    def test_failing_file_dropped(self, monkeypatch, clean_python, generated_js):
        def flaky(record, others=()):
            if record.path == "bad.js":
                raise RecursionError("maximum recursion depth exceeded")
            return analyze_file(record, others)

        monkeypatch.setattr("debt_tracker.analysis.snapshot.analyze_file", flaky)
        records = [
            FileRecord("a.py", clean_python),
            FileRecord("bad.js", generated_js),
            FileRecord("c.js", generated_js),
        ]
        for workers in (1, 3):
            assert [f.path for f in analyze_records(records, workers)] == ["a.py", "c.js"]


class TestSummarizeFiles:
    def test_aggregates(self, clean_python, generated_js):
        files = [
            analyze_file(FileRecord("a.py", clean_python)),
            analyze_file(FileRecord("b.js", generated_js)),
            analyze_file(FileRecord("c.txt", "")),
            analyze_file(FileRecord("d.py", "x = 1")),
        ]
        summary = summarize_files(files)
        assert summary.avg_ai_likelihood == pytest.approx(
            sum(f.ai_likelihood for f in files) / 4
        )
        assert summary.total_issues == sum(len(f.issues) for f in files)
        assert summary.high_risk_files == sum(1 for f in files if f.is_high_risk)
        ranked = sorted(files, key=lambda f: f.combined_debt, reverse=True)
        assert summary.top_refactor_targets == [f.path for f in ranked[:3]]

    def test_fewer_than_three_files(self, clean_python):
        summary = summarize_files([analyze_file(FileRecord("a.py", clean_python))])
        assert summary.top_refactor_targets == ["a.py"]


class TestSnapshotAnalyzer:
    def test_end_to_end(self, fake_fetcher, config):
        result = SnapshotAnalyzer(fake_fetcher(), config).analyze(REF)
        assert result.repo_name == "octo/widgets"
        assert result.total_files == 2
        assert result.stars == 7
        assert result.language == "Python"
        assert [f.path for f in result.files] == ["src/calc.py", "web/users.js"]

    def test_language_defaults_to_unknown(self, fake_fetcher, config):
        result = SnapshotAnalyzer(fake_fetcher(language=None), config).analyze(REF)
        assert result.language == "Unknown"

    def test_unfetchable_files_skipped(self, fake_fetcher, config, clean_python):
        fetcher = fake_fetcher(files={"a.py": clean_python, "b.py": None})
        result = SnapshotAnalyzer(fetcher, config).analyze(REF)
        assert [f.path for f in result.files] == ["a.py"]

    def test_no_code_files(self, fake_fetcher, config):
        with pytest.raises(EmptyResultError, match="No code files found"):
            SnapshotAnalyzer(fake_fetcher(files={}), config).analyze(REF)

    def test_nothing_fetchable(self, fake_fetcher, config):
        fetcher = fake_fetcher(files={"a.py": None})
        with pytest.raises(EmptyResultError, match="Could not analyze any files"):
            SnapshotAnalyzer(fetcher, config).analyze(REF)

    def test_scoring_failure_for_every_file(self, fake_fetcher, config, monkeypatch):
        def broken(record, others=()):
            raise ValueError("unscorable")

        monkeypatch.setattr("debt_tracker.analysis.snapshot.analyze_file", broken)
        with pytest.raises(EmptyResultError, match="Could not analyze any files"):
            SnapshotAnalyzer(fake_fetcher(), config).analyze(REF)

    def test_import_edges_resolved(self, fake_fetcher, config, clean_python):
        files = {
            "src/app.js": "import { tokenize } from './calc';\nexport default tokenize;\n",
            "src/calc.js": clean_python,
        }
        result = SnapshotAnalyzer(fake_fetcher(files=files), config).analyze(REF)
        imports = [e for e in result.propagation if e.kind is EdgeKind.IMPORT]
        assert [(e.source, e.target) for e in imports] == [("src/app.js", "src/calc.js")]

    def test_edge_cap_from_config(self, fake_fetcher, generated_js):
        files = {f"web/m{i}.js": generated_js for i in range(6)}
        config = TrackerConfig(cache_enabled=False, max_edges=4, workers=2)
        result = SnapshotAnalyzer(fake_fetcher(files=files), config).analyze(REF)
        assert len(result.propagation) == 4
