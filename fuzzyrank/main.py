"""Main module for the FastAPI application."""
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException, status
from redis.exceptions import RedisError
from .cache import cache_manager
from .models import RankRequest, RankResponse, ScoreDetails, ScoreRequest, ScoreResponse
from .scoring.fuzzy import FuzzyScorer, fuzzy_scorer
from .search.rank_service import RankService
from .logger import logger


# Service de classement (utilise le cache Redis global)
rank_service: RankService = RankService(cache=cache_manager)
# Alias `service` pour les tests qui patchent `main.service`
service = rank_service


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle FastAPI startup and shutdown events."""
    logger.info("Starting up FuzzyRank API...")

    try:
        await cache_manager.ping()
        logger.info("Redis cache connected successfully.")
    except RedisError as e:
        logger.error("Failed to connect to Redis: {error}", error=e)

    yield

    logger.info("Shutting down FuzzyRank API...")
    await cache_manager.close()
    logger.info("Redis connection closed.")


app = FastAPI(
    title="FuzzyRank - Fuzzy ranking service",
    lifespan=lifespan
)


def get_service() -> RankService:
    """Dépendance FastAPI pour obtenir l'instance du service de classement."""
    return service


def get_scorer() -> FuzzyScorer:
    """Dépendance FastAPI pour obtenir le scoreur."""
    return fuzzy_scorer


@app.post("/rank", response_model=RankResponse)
async def rank(req: RankRequest, svc: RankService = Depends(get_service)):
    """Classe les candidats du meilleur au moins bon match."""
    try:
        logger.info(
            "Received rank request: query='{query}', {count} candidates",
            query=req.query, count=len(req.candidates),
        )
        return await svc.rank(req)
    except Exception as e:
        logger.exception("Error processing rank request")
        raise HTTPException(status_code=500, detail={"error": str(e)}) from e


@app.post("/score", response_model=ScoreResponse)
def score(req: ScoreRequest, scorer: FuzzyScorer = Depends(get_scorer)):
    """Score d'une valeur, avec le détail des composantes s'il y a match."""
    details = scorer.explain(req.value, req.test)
    value_score = scorer.score(req.value, req.test)
    return ScoreResponse(
        value=req.value,
        test=req.test,
        score=value_score,
        matches=value_score >= 0,
        details=None if details is None else ScoreDetails(
            positions=list(details.positions),
            first_index=details.first_index,
            total_separation=details.total_separation,
            start_component=details.start_component,
            compactness_component=details.compactness_component,
            coverage_component=details.coverage_component,
        ),
    )


@app.get("/")
def root():
    """Root endpoint to check API status."""
    return {"status": "ok", "message": "FuzzyRank API is running 🚀"}


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Monitoring"])
async def health_check():
    """
    Health check endpoint.

    Checks connectivity to Redis.
    Returns 200 OK if it is reachable, otherwise 503 Service Unavailable.
    """
    services_status = {"redis": "ok"}
    try:
        await cache_manager.ping()
    except RedisError:
        services_status["redis"] = "error"
        logger.error("Health check failed: Redis connection error.")

    if "error" in services_status.values():
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=services_status)

    return services_status
