# tests/test_fuzzy.py
import pytest
from unittest.mock import patch

from fuzzyrank.scoring import fuzzy
from fuzzyrank.scoring.fuzzy import (
    FuzzyScorer,
    ScoringWeights,
    fuzzy_explain,
    fuzzy_matches,
    fuzzy_score,
)


class TestEmptyQuery:
    """Une requête vide matche toujours avec le meilleur score."""

    @pytest.mark.parametrize("val", ["", "a", "Hello World", "   ", "日本語"])
    def test_empty_query_is_best_match(self, val):
        assert fuzzy_score(val, "") == 0
        assert fuzzy_matches(val, "") is True


class TestNoMatch:
    """Les caractères absents ou dans le mauvais ordre donnent la sentinelle."""

    @pytest.mark.parametrize("val, test", [
        ("xyz", "ab"),        # premier caractère absent
        ("abc", "ca"),        # ordre inversé
        ("abc", "abd"),       # dernier caractère absent
        ("ab", "abc"),        # requête plus longue que la valeur
        ("", "a"),            # valeur vide
        ("   ", "a"),         # espaces uniquement
    ])
    def test_not_a_subsequence(self, val, test):
        assert fuzzy_score(val, test) < 0
        assert fuzzy_score(val, test) == -1.0
        assert fuzzy_matches(val, test) is False
        assert fuzzy_explain(val, test) is None


class TestScoreValues:
    """Valeurs et propriétés du score."""

    def test_exact_match_scores_zero(self):
        assert fuzzy_score("Hello", "hello") == pytest.approx(0.0, abs=1e-9)
        assert fuzzy_score("abc", "abc") == pytest.approx(0.0, abs=1e-9)

    def test_case_insensitive(self):
        assert fuzzy_score("HELLO", "he") == fuzzy_score("hello", "HE")
        assert fuzzy_matches("AbC", "aBc")

    def test_prefix_and_scattered_values(self):
        # début 1.0, compacité 1.0, couverture 2/3
        assert fuzzy_score("abc", "ab") == pytest.approx(0.1)
        # début 1.0, compacité 0 (2 caractères sautés), couverture 0.4
        assert fuzzy_score("axybz", "ab") == pytest.approx(0.68)

    def test_later_start_is_worse(self):
        assert fuzzy_score("abxxxx", "ab") < fuzzy_score("xxxxab", "ab")

    @pytest.mark.parametrize("contiguous, scattered, test", [
        ("abcde", "axbxcde", "abc"),
        ("zzabc", "zzaxxbxxc", "abc"),
        ("hello", "h-e-l-l-o", "hello"),
        ("qwab", "qwa_______b", "ab"),
    ])
    def test_scatter_never_improves_score(self, contiguous, scattered, test):
        assert fuzzy_score(scattered, test) >= fuzzy_score(contiguous, test)

    @pytest.mark.parametrize("val, test", [
        ("abc", "a"), ("a long title here", "lth"), ("x", "x"), ("zzzzzzzzzzq", "q"),
    ])
    def test_matched_scores_stay_in_unit_range(self, val, test):
        assert 0.0 <= fuzzy_score(val, test) <= 1.0

    def test_unicode_and_whitespace_never_raise(self):
        assert fuzzy_score("Café", "CAFÉ") == pytest.approx(0.0, abs=1e-9)
        assert fuzzy_matches("Café", "cafe") is False
        assert fuzzy_matches("日本語", "本")
        assert fuzzy_matches("a b", " ")


class TestExplain:
    """Détail des composantes."""

    def test_details_of_scattered_match(self):
        details = fuzzy_explain("axybz", "ab")
        assert details.positions == (0, 3)
        assert details.first_index == 0
        assert details.total_separation == 2
        assert details.start_component == pytest.approx(1.0)
        assert details.compactness_component == 0.0
        assert details.coverage_component == pytest.approx(0.4)
        assert details.score == pytest.approx(fuzzy_score("axybz", "ab"))

    def test_greedy_search_takes_first_occurrence(self):
        # Le premier "a" est retenu même si "ab" contigu existe plus loin
        details = fuzzy_explain("axxab", "ab")
        assert details.positions == (0, 4)
        assert details.total_separation == 3


class TestWeights:
    """Poids et sentinelle configurables."""

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            ScoringWeights(start=0.5, compactness=0.5, coverage=0.5)

    def test_weights_must_be_non_negative(self):
        with pytest.raises(ValueError):
            ScoringWeights(start=-0.2, compactness=0.9, coverage=0.3)

    def test_sentinel_must_be_negative(self):
        with pytest.raises(ValueError):
            FuzzyScorer(no_match=0.0)

    def test_custom_weights(self):
        scorer = FuzzyScorer(ScoringWeights(start=0.0, compactness=1.0, coverage=0.0))
        assert scorer.score("abc", "ab") == pytest.approx(0.0, abs=1e-9)
        assert scorer.score("axybz", "ab") == pytest.approx(1.0)

    def test_custom_sentinel(self):
        scorer = FuzzyScorer(no_match=-5.0)
        assert scorer.score("xyz", "a") == -5.0
        assert scorer.matches("xyz", "a") is False


class TestLruCache:
    """Le score est mis en cache pour des arguments identiques."""

    def test_score_is_cached(self):
        with patch.object(fuzzy, "greedy_positions", wraps=fuzzy.greedy_positions) as spy:
            scorer = FuzzyScorer()
            first = scorer.score("cached value", "cv")
            second = scorer.score("cached value", "cv")

            assert first == second
            spy.assert_called_once_with("cached value", "cv")
