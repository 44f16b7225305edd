'''
Module de configuration pour le logger centralisé de l'application.

Ce module utilise Loguru pour fournir un logger pré-configuré avec des sorties
vers la console (avec couleurs) et, si LOG_TO_FILE est actif, des fichiers rotatifs.
'''

import os
import sys

from loguru import logger

from fuzzyrank.config import settings

# ==============================================================================
# Configuration de Loguru
# ==============================================================================

# 1. Supprimer le handler par défaut pour éviter les doublons
logger.remove()

# 2. Définir les formats pour les logs
LOG_FORMAT_CONSOLE = (
    "<white>{time:YYYY-MM-DD HH:mm:ss.SSS}</white> | "
    "<level>{level: <8}</level> | "
    "<light-black>{name}:{function}:{line}</light-black> - "
    "<level><b>{message}</b></level>"
)
LOG_FORMAT_FILE = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} - "
    "{message}"
)

# 3. Handler console (stderr)
logger.add(
    sys.stderr,
    level=settings.LOG_LEVEL,
    format=LOG_FORMAT_CONSOLE,
    colorize=True,
    backtrace=True,
    diagnose=True
)


def _add_file_sink(filename: str, level: str, **kwargs) -> None:
    """Ajoute un fichier de log à rotation journalière (30 jours, zip)."""
    logger.add(
        os.path.join(settings.LOG_DIR, filename),
        level=level,
        format=LOG_FORMAT_FILE,
        rotation="00:00",
        retention="30 days",
        compression="zip",
        encoding="utf-8",
        **kwargs
    )


# 4. Handlers fichiers : un fichier par famille de niveaux
if settings.LOG_TO_FILE:
    os.makedirs(settings.LOG_DIR, exist_ok=True)

    _add_file_sink(
        "debug.log", "DEBUG",
        filter=lambda record: record["level"].name == "DEBUG"
    )
    _add_file_sink(
        "info.log", "INFO",
        filter=lambda record: record["level"].name in ("INFO", "WARNING")
    )
    # Trace complète + variables pour les erreurs
    _add_file_sink("error.log", "ERROR", backtrace=True, diagnose=True)

# Exemple d'utilisation :
# from fuzzyrank.logger import logger
# logger.debug("Tri flou avec la requête: {query}", query="abc")
