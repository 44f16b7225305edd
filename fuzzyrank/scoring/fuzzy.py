"""Score de correspondance floue par sous-séquence ordonnée.

Convention de tout le service : plus le score est bas, meilleure est la
correspondance. 0.0 est une correspondance parfaite (requête identique ou
vide), les correspondances valides restent dans [0, 1] et une valeur négative
(sentinelle, -1.0 par défaut) signifie "aucune correspondance".

Le score combine trois composantes pondérées, calculées sur les versions en
minuscules des deux chaînes :

- début : ``1 - first_index / len(val)``, récompense un match qui commence tôt ;
- compacité : ``max(1 - total_separation / len(test), 0)``, récompense des
  caractères proches les uns des autres ;
- couverture : ``len(test) / len(val)``, pénalise le texte non couvert.

La recherche est gloutonne et sans retour arrière : chaque caractère de la
requête est pris à sa première occurrence après le précédent. Elle trouve
toujours une sous-séquence si elle existe, mais pas forcément la plus compacte
(``"axxab"`` / ``"ab"`` utilise le premier ``a``).
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from fuzzyrank.config import settings

BEST_SCORE = 0.0


@dataclass(frozen=True)
class ScoringWeights:
    """Poids des trois composantes du score (somme = 1.0)."""
    start: float = 0.20
    compactness: float = 0.50
    coverage: float = 0.30

    def __post_init__(self):
        values = (self.start, self.compactness, self.coverage)
        if any(v < 0 for v in values):
            raise ValueError(f"Scoring weights must be non-negative: {values}")
        if abs(sum(values) - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(values):.6f}")

    @classmethod
    def from_settings(cls) -> "ScoringWeights":
        """Construit les poids depuis la configuration de l'application."""
        return cls(
            start=settings.W_START,
            compactness=settings.W_COMPACTNESS,
            coverage=settings.W_COVERAGE,
        )


@dataclass(frozen=True)
class MatchDetails:
    """Détail d'une correspondance : positions et composantes du score."""
    positions: Tuple[int, ...]
    first_index: int
    total_separation: int
    start_component: float
    compactness_component: float
    coverage_component: float
    score: float


def greedy_positions(lval: str, ltest: str) -> Optional[List[int]]:
    """
    Cherche les caractères de ``ltest`` dans ``lval``, dans l'ordre.

    Args:
        lval: Chaîne candidate (déjà en minuscules)
        ltest: Requête (déjà en minuscules)

    Returns:
        Les index des caractères trouvés, ou None dès qu'un caractère manque
    """
    positions: List[int] = []
    start = 0
    for char in ltest:
        index = lval.find(char, start)
        if index == -1:
            return None
        positions.append(index)
        start = index + 1
    return positions


class FuzzyScorer:
    """Calcule le score flou d'une chaîne candidate pour une requête."""

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        no_match: float = settings.NO_MATCH_SCORE,
    ):
        if no_match >= 0:
            raise ValueError(f"no_match sentinel must be negative, got {no_match}")
        self.weights = weights or ScoringWeights.from_settings()
        self.no_match = no_match

    def explain(self, val: str, test: str) -> Optional[MatchDetails]:
        """
        Calcule toutes les composantes du score.

        Args:
            val: Chaîne candidate
            test: Fragment saisi par l'utilisateur

        Returns:
            Le détail de la correspondance, ou None s'il n'y en a pas
        """
        if not test:
            return MatchDetails(
                positions=(),
                first_index=0,
                total_separation=0,
                start_component=1.0,
                compactness_component=1.0,
                coverage_component=1.0,
                score=BEST_SCORE,
            )

        lval = val.lower()
        ltest = test.lower()

        # Pas de division par zéro : une valeur vide ne matche rien
        if not lval:
            return None

        positions = greedy_positions(lval, ltest)
        if positions is None:
            return None

        first_index = positions[0]
        total_separation = sum(
            current - previous - 1
            for previous, current in zip(positions, positions[1:])
        )

        start_component = 1.0 - first_index / len(lval)
        compactness_component = max(1.0 - total_separation / len(ltest), 0.0)
        coverage_component = len(ltest) / len(lval)

        composite = (
            self.weights.start * start_component
            + self.weights.compactness * compactness_component
            + self.weights.coverage * coverage_component
        )

        return MatchDetails(
            positions=tuple(positions),
            first_index=first_index,
            total_separation=total_separation,
            start_component=start_component,
            compactness_component=compactness_component,
            coverage_component=coverage_component,
            score=max(1.0 - composite, BEST_SCORE),
        )

    @lru_cache(maxsize=settings.SCORE_CACHE_SIZE)
    def score(self, val: str, test: str) -> float:
        """Score de ``test`` contre ``val`` (bas = meilleur, négatif = aucun match)."""
        if not test:
            return BEST_SCORE
        details = self.explain(val, test)
        if details is None:
            return self.no_match
        return details.score

    def matches(self, val: str, test: str) -> bool:
        """Vrai si ``test`` est une sous-séquence de ``val`` (casse ignorée)."""
        return self.score(val, test) >= 0


# Instance globale réutilisable
fuzzy_scorer = FuzzyScorer()


def fuzzy_score(val: str, test: str) -> float:
    return fuzzy_scorer.score(val, test)


def fuzzy_matches(val: str, test: str) -> bool:
    return fuzzy_scorer.matches(val, test)


def fuzzy_explain(val: str, test: str) -> Optional[MatchDetails]:
    return fuzzy_scorer.explain(val, test)
