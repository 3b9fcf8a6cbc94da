"""
Routes HTTP de wiki-translator.

    POST /translate_batch       {strings, targetLang, pageTitle?} -> {translations}
    POST /cached_batch          {strings, targetLang}             -> {translations}
    POST /translate/<rev_id>    {targetLang, section?}            -> {html, section}
    GET  /skeleton/<rev_id>     ?lang=..&section=..               -> {html, section, units}
"""

import re

from flask import Blueprint, current_app, jsonify, request

from ..exceptions import (
    ConfigurationError,
    ProviderError,
    RevisionNotFound,
    SegmentationAmbiguity,
)
from ..logger import get_logger

logger = get_logger(__name__)

api_bp = Blueprint("wiki_translator", __name__)

# Codes de langue : 2-3 lettres, sous-étiquettes optionnelles (zh-tw, pt-br)
LANG_CODE = re.compile(r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{2,8})*$")


class InvalidRequest(ValueError):
    """Corps ou paramètres de requête invalides (réponse 400)."""


def _services() -> dict:
    return current_app.extensions["wiki_translator"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return data


def _lang(value) -> str:
    if not isinstance(value, str) or not LANG_CODE.match(value):
        raise InvalidRequest("targetLang must be a language code such as 'es'")
    return value.lower()


def _strings(value) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise InvalidRequest("strings must be a list of strings")
    return value


def _section(value) -> int:
    # bool est une sous-classe de int
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidRequest("section must be a non-negative integer")
    return value


def truncate_batch(strings: list[str], cap: int) -> tuple[list[str], int]:
    """
    Plafonne un batch : les chaînes au-delà de cap sont ignorées.

    Returns:
        (chaînes conservées, nombre de chaînes ignorées)

    Example:
        >>> truncate_batch(["a", "b", "c"], 2)
        (['a', 'b'], 1)
    """
    if len(strings) <= cap:
        return strings, 0
    return strings[:cap], len(strings) - cap


# ============================================================
# 🔹 Gestion des erreurs
# ============================================================


@api_bp.errorhandler(InvalidRequest)
def _invalid_request(e: InvalidRequest):
    return jsonify(error=str(e), kind="invalid_request"), 400


@api_bp.errorhandler(RevisionNotFound)
def _revision_not_found(e: RevisionNotFound):
    return jsonify(error=str(e), kind="not_found"), 404


@api_bp.errorhandler(ConfigurationError)
def _configuration_error(e: ConfigurationError):
    logger.error(f"❌ Configuration invalide : {e}")
    return jsonify(error=str(e), kind="configuration"), 500


@api_bp.errorhandler(ProviderError)
def _provider_error(e: ProviderError):
    logger.error(f"❌ API Failure : {e}")
    return jsonify(error=str(e), kind="provider"), 502


@api_bp.errorhandler(SegmentationAmbiguity)
def _segmentation_ambiguity(e: SegmentationAmbiguity):
    logger.error(f"❌ Unités non résolues : {e}")
    return jsonify(error=str(e), kind="unresolved", unresolved=e.unresolved), 502


# ============================================================
# 🔹 Routes
# ============================================================


@api_bp.post("/translate_batch")
def translate_batch():
    """Traduction tolérante d'un batch de chaînes."""
    body = _json_body()
    strings = _strings(body.get("strings"))
    lang = _lang(body.get("targetLang"))
    page_title = body.get("pageTitle") or "Unknown Page"

    services = _services()
    logger.info(
        f"{request.remote_addr} {page_title} "
        f"({len(strings)} chaîne(s), agent={request.headers.get('User-Agent', '?')})"
    )

    strings, dropped = truncate_batch(strings, services["settings"].batch_cap)
    if dropped:
        logger.warning(f"✂️ Batch tronqué : {dropped} chaîne(s) ignorée(s)")

    outcome = services["translator"].translate_batch(strings, lang)

    if outcome.error is not None and outcome.unresolved:
        if isinstance(outcome.error, ConfigurationError):
            kind, status = "configuration", 500
        else:
            kind, status = "provider", 502
        return (
            jsonify(
                error=str(outcome.error),
                kind=kind,
                translations=outcome.translations,
            ),
            status,
        )

    return jsonify(translations=outcome.translations)


@api_bp.post("/cached_batch")
def cached_batch():
    """Traductions déjà en cache uniquement (aucun appel fournisseur)."""
    body = _json_body()
    strings = _strings(body.get("strings"))
    lang = _lang(body.get("targetLang"))

    services = _services()
    strings, _ = truncate_batch(strings, services["settings"].batch_cap)
    translations = services["translator"].get_cached_translations(strings, lang)
    return jsonify(translations=translations)


@api_bp.post("/translate/<int:rev_id>")
def translate_section(rev_id: int):
    """Traduction stricte d'une section ; html vide = fin du document."""
    body = _json_body()
    lang = _lang(body.get("targetLang"))
    section = _section(body.get("section", 0))

    result = _services()["sections"].translate_section(rev_id, lang, section)
    return jsonify(result)


@api_bp.get("/skeleton/<int:rev_id>")
def skeleton_section(rev_id: int):
    """Squelette à placeholders d'une section, servi sans appel fournisseur."""
    lang = _lang(request.args.get("lang"))
    try:
        section = int(request.args.get("section", "0"))
    except ValueError as e:
        raise InvalidRequest("section must be a non-negative integer") from e
    section = _section(section)

    result = _services()["sections"].skeleton_section(rev_id, lang, section)
    return jsonify(result)
