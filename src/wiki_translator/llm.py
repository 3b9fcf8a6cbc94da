import datetime
import json
import os
import re
import threading
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, select_autoescape
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    OpenAI,
    OpenAIError,
)
from openai.types.chat import ChatCompletionMessageParam

from .circuit import CircuitBreaker
from .config import DEFAULT_LLM_MODEL, DEFAULT_LLM_URL, TemplateNames
from .exceptions import ConfigurationError, ProviderTransportError
from .logger import get_logger, get_session_log_path
from .translation.parser import parse_provider_output

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


def get_api_key() -> Optional[str]:
    """Lit la clé API depuis l'environnement (et le fichier .env)."""
    load_dotenv()
    return os.getenv("API_KEY") or None


class LLM:
    """
    Client du fournisseur de traduction (API compatible OpenAI, Gemini par
    défaut) avec :
      - rendu du prompt système depuis un template Jinja2,
      - un fichier de log par requête,
      - un disjoncteur sur les échecs de transport.

    Un appel = un batch. Aucun retry ici : le SDK est construit avec
    max_retries=0, les reprises sont gérées par l'appelant.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LLM_MODEL,
        url: str = DEFAULT_LLM_URL,
        api_key: Optional[str] = None,
        prompt_dir: str | Path = TEMPLATE_DIR,
        temperature: float = 0.2,
        timeout: float = 120.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        client: Optional[Any] = None,
    ):
        self.model_name = model_name
        self.url = url
        self.api_key = api_key if api_key is not None else get_api_key()
        self.temperature = temperature
        self.timeout = timeout
        self.circuit = circuit_breaker or CircuitBreaker()
        self._client = client

        self.env = Environment(
            loader=FileSystemLoader(str(prompt_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

        self._log_counter = 0
        self._counter_lock = threading.Lock()

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self.url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    # -----------------------------------
    # 🔹 Rendu du template
    # -----------------------------------
    def render_prompt(self, template_name: str, **kwargs) -> str:
        """Rend un template Jinja2 avec les variables données."""
        template = self.env.get_template(template_name)
        return template.render(**kwargs)

    # -----------------------------------
    # 🔹 Gestion du log
    # -----------------------------------
    def _create_log(
        self, prompt: str, content: str, context: Optional[str] = None
    ) -> Path:
        """
        Écrit l'en-tête du log d'une requête et retourne son chemin.

        Args:
            prompt: Le prompt système envoyé
            content: Le contenu envoyé
            context: Contexte pour nommer le fichier (ex: "batch_es")
        """
        timestamp = datetime.datetime.now().isoformat().replace(":", "-")

        with self._counter_lock:
            self._log_counter += 1
            counter = self._log_counter

        if context:
            filename = f"llm_{context}_{counter:04d}_{timestamp}.log"
        else:
            filename = f"llm_{counter:04d}_{timestamp}.log"

        log_path = get_session_log_path(filename)

        header = (
            f"=== LLM REQUEST LOG ===\n"
            f"Timestamp : {timestamp}\n"
            f"Model     : {self.model_name}\n"
            f"Prompt len: {len(prompt)} chars\n"
            f"{'-'*40}\n\n"
            f"--- PROMPT ---\n{prompt}\n\n"
            f"--- CONTENT ---\n{content}\n\n"
            f"--- RESPONSE ---\n"
        )
        with open(log_path, "w", encoding="utf-8") as f:
            f.write(header)
        return log_path

    def _append_response(self, log_path: Path, response: str):
        """Ajoute la réponse à la fin du log existant."""
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(response.strip() + "\n")

    # -----------------------------------
    # 🔹 Requête simple
    # -----------------------------------
    def query(
        self,
        system_prompt: str,
        content: str,
        context: Optional[str] = None,
    ) -> str:
        """
        Envoie une requête au fournisseur.

        Args:
            system_prompt: Instructions système
            content: Contenu utilisateur
            context: Contexte pour nommer le fichier de log

        Returns:
            Le texte de la réponse ("" si la réponse est vide)

        Raises:
            ProviderTransportError: Timeout, erreur réseau ou statut non-succès
        """
        log_path = self._create_log(system_prompt, content, context)
        messages: list[ChatCompletionMessageParam] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": content},
        ]

        try:
            resp = self._get_client().chat.completions.create(
                model=self.model_name,
                messages=messages,
                temperature=self.temperature,
                timeout=self.timeout,
            )
        except APITimeoutError as e:
            self._append_response(log_path, f"[ERREUR: Timeout - {e}]")
            logger.warning(f"⏱️ Timeout du fournisseur après {self.timeout:.0f}s")
            raise ProviderTransportError(
                f"Timeout du fournisseur après {self.timeout:.0f}s"
            ) from e
        except APIConnectionError as e:
            self._append_response(log_path, f"[ERREUR: Connexion - {e}]")
            logger.warning(f"🔌 Erreur de connexion au fournisseur : {e}")
            raise ProviderTransportError(f"Erreur de connexion : {e}") from e
        except APIStatusError as e:
            self._append_response(log_path, f"[ERREUR API {e.status_code}: {e}]")
            logger.error(f"❌ Erreur API {e.status_code} : {e}")
            raise ProviderTransportError(
                f"Statut {e.status_code} du fournisseur : {e}"
            ) from e
        except OpenAIError as e:
            self._append_response(log_path, f"[ERREUR OPENAI: {e}]")
            logger.error(f"❌ Erreur OpenAI générique : {e}")
            raise ProviderTransportError(f"Erreur du client fournisseur : {e}") from e

        result = resp.choices[0].message.content if resp.choices else None
        response_text = result.strip() if result is not None else ""
        self._append_response(log_path, response_text or "Result Empty")
        logger.info(f"✅ Requête fournisseur réussie ({len(content)} chars)")
        return response_text

    # -----------------------------------
    # 🔹 Traduction d'un batch
    # -----------------------------------
    def translate(self, units: list[str], target_lang: str) -> list[str]:
        """
        Traduit une liste d'unités (déjà dédupliquée) vers une langue.

        Args:
            units: Textes à traduire, dans l'ordre
            target_lang: Code de la langue cible (ex: "es")

        Returns:
            Traductions, de même longueur et dans le même ordre que units

        Raises:
            ConfigurationError: Si aucune clé API n'est configurée
            ProviderTransportError: Échec réseau, timeout, statut, circuit ouvert
            ProviderResponseError: Sortie non JSON ou de mauvaise longueur
        """
        if not units:
            return []

        if not self.api_key:
            logger.error("❌ Aucune clé API configurée (variable API_KEY)")
            raise ConfigurationError(
                "La clé API du fournisseur n'est pas définie. "
                "Ajoutez API_KEY=... dans votre fichier .env"
            )

        system_prompt = self.render_prompt(
            TemplateNames.Batch_Template,
            target_language=target_lang,
            count=len(units),
        )
        content = json.dumps(units, ensure_ascii=False)

        if self.circuit.is_open():
            raise ProviderTransportError(
                "Disjoncteur ouvert : trop d'échecs consécutifs du fournisseur"
            )

        logger.info(f"🔄 Envoi de {len(units)} unité(s) vers '{target_lang}'")

        try:
            context = "batch_" + re.sub(r"[^\w-]", "_", target_lang)
            raw = self.query(system_prompt, content, context=context)
        except ProviderTransportError:
            self.circuit.record_failure()
            raise

        self.circuit.record_success()
        return parse_provider_output(raw, expected_count=len(units))
