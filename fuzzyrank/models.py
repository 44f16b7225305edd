"""Modèles Pydantic pour les requêtes et réponses."""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from fuzzyrank.config import settings


class Candidate(BaseModel):  # pylint: disable=too-few-public-methods
    """Élément candidat à classer (titre affiché + métadonnées libres)."""
    uid: Optional[str] = None
    title: str
    subtitle: Optional[str] = None
    autocomplete: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def label(self, field: str = "title") -> str:
        """Libellé utilisé pour le score ; retombe sur le titre si le champ est vide."""
        return getattr(self, field, None) or self.title


class RankOptions(BaseModel):  # pylint: disable=too-few-public-methods
    """Options d'un classement."""
    # Champ du candidat comparé à la requête
    label_field: Literal["title", "subtitle", "autocomplete", "uid"] = "title"
    # None => valeur de settings.DROP_UNMATCHED
    drop_unmatched: Optional[bool] = None
    # Nombre max de candidats classés (avant pagination)
    limit: int = Field(default=settings.DEFAULT_LIMIT, ge=1)
    # Pagination finale ; per_page=None renvoie tout
    per_page: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class RankRequest(BaseModel):  # pylint: disable=too-few-public-methods
    """Requête de classement."""
    query: str = ""
    candidates: List[Candidate] = Field(default_factory=list)
    options: RankOptions = Field(default_factory=RankOptions)


class RankedCandidate(Candidate):  # pylint: disable=too-few-public-methods
    """Candidat enrichi de son score."""
    score: float
    matched: bool


class RankResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Réponse de classement."""
    hits: List[RankedCandidate]
    total: int  # Nombre de résultats classés avant pagination
    matched_count: int
    total_before_filter: int
    query_time_ms: float
    memory_used_mb: Optional[float] = None


class ScoreRequest(BaseModel):  # pylint: disable=too-few-public-methods
    """Score d'une seule valeur."""
    value: str
    test: str


class ScoreDetails(BaseModel):  # pylint: disable=too-few-public-methods
    """Composantes du score."""
    positions: List[int]
    first_index: int
    total_separation: int
    start_component: float
    compactness_component: float
    coverage_component: float


class ScoreResponse(BaseModel):  # pylint: disable=too-few-public-methods
    """Réponse de score."""
    value: str
    test: str
    score: float
    matches: bool
    details: Optional[ScoreDetails] = None
