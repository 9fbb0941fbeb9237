"""Tests for debt_tracker.heuristics.patterns module."""

import time

import pytest

from debt_tracker.heuristics.patterns import (
    ai_debt_contribution,
    comment_redundancy,
    cross_file_share,
    detect_ai_patterns,
    structural_uniformity,
)
from debt_tracker.heuristics import FileRecord, analyze_file
from debt_tracker.heuristics.text import TextProfile


class TestAiDebtContribution:
    """Tests for the likelihood -> contribution mapping."""

    @pytest.mark.parametrize(
        "likelihood, expected",
        [(0.0, 8), (0.2, 15), (0.39, 22), (0.4, 67), (1.0, 100)],
    )
    def test_two_piece_mapping(self, likelihood, expected):
        assert ai_debt_contribution(likelihood) == expected

    def test_bounded(self):
        for i in range(101):
            assert 0 <= ai_debt_contribution(i / 100) <= 100


class TestSubScores:
    """Tests for individual pattern sub-scores."""

    def test_structural_uniformity_needs_three_bodies(self):
        text = "function a(x) { return x + 1; }\nfunction b(y) { return y + 1; }\n"
        score, bodies = structural_uniformity(TextProfile.from_text(text))
        assert score == 0.0
        assert bodies == 2

    def test_structural_uniformity_identical_shapes(self, generated_js):
        score, bodies = structural_uniformity(TextProfile.from_text(generated_js))
        assert bodies == 5
        assert score == 1.0

    def test_structural_uniformity_near_duplicates_of_different_length(self):
        text = (
            "function a(x) { const y = x + 1; return y * 2; }\n"
            "function b(x) { const y = x + 1; return -y * 2; }\n"
            "function c(x) { if (x) throw new Error(x); }\n"
        )
        score, bodies = structural_uniformity(TextProfile.from_text(text))
        assert bodies == 3
        assert score == pytest.approx(2 / 3)

    def test_structural_uniformity_exact_duplicates_without_comparisons(self, monkeypatch):
        monkeypatch.setattr("debt_tracker.heuristics.patterns.MAX_SHAPE_COMPARISONS", 0)
        text = (
            "function a(x) { return x + 1; }\n"
            "function b(y) { return y + 2; }\n"
            "function c(z) { return z + 3; }\n"
            "function d(w) { const v = w * 2; return -v; }\n"
        )
        score, bodies = structural_uniformity(TextProfile.from_text(text))
        assert bodies == 4
        assert score == pytest.approx(0.75)

    @pytest.mark.slow
    def test_structural_uniformity_bounded_on_many_functions(self):
        ops = "+-"
        lines = []
        for i in range(1400):
            expr = "".join(f"{ops[(i >> bit) & 1]}a" for bit in range(11))
            lines.append(f"function f{i}(a){{return a{expr};}}")
        text = "\n".join(lines) + "\n"
        assert len(text) < 100_000

        start = time.perf_counter()
        analysis = analyze_file(FileRecord("src/generated.js", text))
        assert time.perf_counter() - start < 3.0
        assert analysis.function_count == 1400

    def test_comment_redundancy_counts_action_verbs(self):
        text = "// returns the total\n// the odd case\n# sets the flag\nx = 1"
        assert comment_redundancy(TextProfile.from_text(text)) == pytest.approx(2 / 3)

    def test_cross_file_share_none_without_corpus(self):
        assert cross_file_share("const something = computeTheThing();", []) is None

    def test_cross_file_share_fraction(self):
        text = "const alpha = buildTheAlphaValue();\nconst beta = buildTheBetaValue();\n"
        other = "// unrelated\nconst alpha = buildTheAlphaValue();\n"
        assert cross_file_share(text, [other]) == 0.5


class TestDetectAiPatterns:
    """Tests for the pattern detector entry point."""

    def test_empty_text_gets_base_likelihood(self):
        result = detect_ai_patterns("")
        assert result.ai_likelihood == pytest.approx(0.05)
        assert result.issues == []
        assert result.ai_debt_contribution == 10

    def test_generated_code_scores_high(self, generated_js):
        result = detect_ai_patterns(generated_js)
        assert result.ai_likelihood > 0.5
        for tag in (
            "structurally uniform functions",
            "redundant comments",
            "missing error handling",
            "excessive comments",
            "overly generic naming",
        ):
            assert tag in result.issues

    def test_clean_code_scores_lower(self, clean_python, generated_js):
        clean = detect_ai_patterns(clean_python)
        generated = detect_ai_patterns(generated_js)
        assert clean.ai_likelihood < generated.ai_likelihood
        assert "missing error handling" not in clean.issues

    def test_likelihood_is_max_of_rules_and_blend(self, generated_js):
        result = detect_ai_patterns(generated_js)
        expected = min(1.0, max(result.rule_score + 0.05, result.weighted_ai))
        assert result.ai_likelihood == pytest.approx(expected)

    def test_cross_file_clone_tag(self, generated_js):
        result = detect_ai_patterns(generated_js, others=[generated_js])
        assert "cross-file clone" in result.issues

    def test_no_cross_file_tag_without_corpus(self, generated_js):
        result = detect_ai_patterns(generated_js)
        assert "cross-file clone" not in result.issues
        assert "shared boilerplate" not in result.issues

    def test_deterministic(self, generated_js, clean_python):
        first = detect_ai_patterns(generated_js, others=[clean_python])
        second = detect_ai_patterns(generated_js, others=[clean_python])
        assert first == second

    def test_bounded(self, generated_js, clean_python):
        for text in (generated_js, clean_python, "", "\n\n\n", "x" * 5000):
            result = detect_ai_patterns(text)
            for value in (
                result.ai_likelihood,
                result.sus,
                result.tdd,
                result.pri,
                result.crs,
                result.scs,
            ):
                assert 0.0 <= value <= 1.0
            assert 0 <= result.ai_debt_contribution <= 100
