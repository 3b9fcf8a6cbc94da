"""
Parsing des sorties du fournisseur de traduction.
"""

import json
import re

from ..exceptions import ProviderResponseError

# Bloc de code markdown englobant toute la réponse (```json ... ```)
_CODE_FENCE = re.compile(r"^\s*```[\w-]*\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def _preview(text: str, limit: int = 200) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def strip_wrapping(output: str) -> str:
    """
    Retire l'habillage non-JSON autour du tableau.

    Enlève le bloc de code englobant toute la réponse (les ``` à l'intérieur
    des chaînes sont conservés), puis tout ce qui précède le premier '['
    et suit le dernier ']'.
    """
    text = output.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1).strip()
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end < start:
        return text
    return text[start : end + 1]


def parse_provider_output(output: str, expected_count: int) -> list[str]:
    """
    Parse la sortie du fournisseur en liste de traductions.

    Format attendu : un tableau JSON de chaînes, de longueur exactement
    égale au nombre d'unités envoyées.

    Args:
        output: Sortie brute du fournisseur
        expected_count: Nombre d'unités envoyées

    Returns:
        Liste des traductions, dans l'ordre des unités

    Raises:
        ProviderResponseError: Si la sortie n'est pas un tableau JSON de
            chaînes, ou si sa longueur diffère de expected_count

    Example:
        >>> parse_provider_output('```json\\n["Hola", "Mundo"]\\n```', 2)
        ['Hola', 'Mundo']
    """
    payload = strip_wrapping(output)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ProviderResponseError(
            f"❌ Réponse non JSON : {e}\n📝 Aperçu : {_preview(output)}",
            expected_count=expected_count,
            raw=output,
        ) from e

    if not isinstance(data, list):
        raise ProviderResponseError(
            f"❌ Tableau JSON attendu, reçu {type(data).__name__}\n"
            f"📝 Aperçu : {_preview(output)}",
            expected_count=expected_count,
            raw=output,
        )

    if not all(isinstance(item, str) for item in data):
        raise ProviderResponseError(
            "❌ Le tableau contient des éléments qui ne sont pas des chaînes",
            expected_count=expected_count,
            actual_count=len(data),
            raw=output,
        )

    if len(data) != expected_count:
        raise ProviderResponseError(
            f"❌ Nombre de traductions incorrect : attendu {expected_count}, "
            f"reçu {len(data)}",
            expected_count=expected_count,
            actual_count=len(data),
            raw=output,
        )

    return data
