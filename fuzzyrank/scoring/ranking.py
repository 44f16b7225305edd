"""Classement stable d'éléments selon leur score flou."""
import math
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from fuzzyrank.config import settings
from fuzzyrank.logger import logger
from fuzzyrank.scoring.fuzzy import FuzzyScorer, fuzzy_scorer

T = TypeVar("T")


@dataclass(frozen=True)
class RankedItem(Generic[T]):
    """Un élément accompagné de son score et de sa position d'origine."""
    item: T
    score: float
    index: int

    @property
    def matched(self) -> bool:
        return self.score >= 0


def _sort_key(ranked: RankedItem) -> float:
    # La sentinelle (négative) passe après tous les vrais scores
    return ranked.score if ranked.matched else math.inf


class Ranker:
    """Trie des éléments du meilleur au moins bon match pour une requête."""

    def __init__(
        self,
        scorer: Optional[FuzzyScorer] = None,
        drop_unmatched: bool = settings.DROP_UNMATCHED,
    ):
        self.scorer = scorer or fuzzy_scorer
        self.drop_unmatched = drop_unmatched

    def score_items(
        self, items: Iterable[T], label_of: Callable[[T], str], query: str
    ) -> List[RankedItem[T]]:
        """Calcule le score de chaque élément une seule fois, dans l'ordre d'entrée."""
        return [
            RankedItem(item=item, score=self.scorer.score(label_of(item), query), index=i)
            for i, item in enumerate(items)
        ]

    def rank_scored(
        self,
        items: Iterable[T],
        label_of: Callable[[T], str],
        query: str,
        drop_unmatched: Optional[bool] = None,
    ) -> List[RankedItem[T]]:
        """
        Classe les éléments et renvoie leurs scores.

        Args:
            items: Éléments candidats (non modifiés)
            label_of: Renvoie le libellé à comparer pour un élément
            query: Fragment saisi par l'utilisateur
            drop_unmatched: Retire les éléments sans correspondance
                (par défaut : valeur du Ranker)

        Returns:
            Les éléments décorés, du meilleur au moins bon. Avec une requête
            vide l'ordre d'entrée est conservé.
        """
        if drop_unmatched is None:
            drop_unmatched = self.drop_unmatched

        scored = self.score_items(items, label_of, query)
        logger.debug("Tri flou de {count} éléments avec: '{query}'", count=len(scored), query=query)

        if drop_unmatched:
            scored = [r for r in scored if r.matched]

        if not query:
            return scored

        # sorted() est stable : à score égal, l'ordre d'entrée est gardé
        return sorted(scored, key=_sort_key)

    def rank(
        self,
        items: Iterable[T],
        label_of: Callable[[T], str],
        query: str,
        drop_unmatched: Optional[bool] = None,
    ) -> List[T]:
        """Comme ``rank_scored`` mais renvoie directement les éléments."""
        return [r.item for r in self.rank_scored(items, label_of, query, drop_unmatched)]


def filter_matches(
    items: Iterable[T],
    label_of: Callable[[T], str],
    query: str,
    scorer: Optional[FuzzyScorer] = None,
) -> List[T]:
    """Garde les éléments dont le libellé correspond à la requête, sans les réordonner."""
    scorer = scorer or fuzzy_scorer
    return [item for item in items if scorer.matches(label_of(item), query)]


def sort_by_label(items: Iterable[T], label_of: Callable[[T], str]) -> List[T]:
    """Tri alphabétique (stable) sur le libellé."""
    return sorted(items, key=label_of)


def insert_at(items: List[T], item: T, index: int) -> List[T]:
    """Renvoie une nouvelle liste avec ``item`` inséré à ``index`` (borné à [0, len])."""
    index = max(0, min(index, len(items)))
    return items[:index] + [item] + items[index:]


# Instance globale réutilisable
ranker = Ranker()
