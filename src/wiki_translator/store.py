"""
Cache d'empreintes : (empreinte du texte, langue) -> texte traduit.

Le cache est adressé par le contenu et en écriture unique : une entrée créée
n'est jamais modifiée ni expirée. Deux écrivains concurrents qui insèrent la
même paire (empreinte, langue) ne provoquent ni erreur ni doublon : la
première écriture gagne, la seconde est ignorée (la traduction d'un même
texte vers une même langue est supposée identique).

Stockage : une table SQLAlchemy `translation_blocks` avec une clé primaire
composite (source_hash, lang).

Schéma:
    source_hash   VARCHAR(64)  PK
    lang          VARCHAR(35)  PK
    content       TEXT
    last_touched  DATETIME
"""

from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional

from sqlalchemy import DateTime, String, Text, create_engine, delete, func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from .exceptions import CacheWriteError
from .logger import get_logger

logger = get_logger(__name__)

# Nombre max d'empreintes par requête IN (limite de paramètres SQLite)
LOOKUP_SLICE = 500


class Base(DeclarativeBase):
    pass


class TranslationBlock(Base):
    """Une entrée du cache : traduction d'un texte normalisé dans une langue."""

    __tablename__ = "translation_blocks"

    source_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    lang: Mapped[str] = mapped_column(String(35), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    last_touched: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __repr__(self) -> str:
        return f"TranslationBlock({self.source_hash[:12]}…, lang={self.lang})"


def make_engine(database_url: str) -> Engine:
    """
    Crée le moteur SQLAlchemy.

    Une base SQLite en mémoire est partagée entre threads via une connexion
    unique ; une base SQLite fichier attend jusqu'à 30 s un verrou d'écriture.
    """
    if database_url.startswith("sqlite"):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(
            database_url,
            connect_args={"timeout": 30, "check_same_thread": False},
        )
    return create_engine(database_url, pool_pre_ping=True)


class FingerprintStore:
    """
    Cache persistant et partagé des traductions.

    Attributes:
        engine: Moteur SQLAlchemy de la base

    Example:
        >>> store = FingerprintStore("sqlite://")
        >>> h = content_hash("Hello")
        >>> store.store({h: "Hola"}, "es")
        >>> store.lookup({h}, "es") == {h: "Hola"}
        True
    """

    def __init__(
        self,
        database_url: str = "sqlite:///translations.db",
        engine: Optional[Engine] = None,
    ) -> None:
        self.engine = engine or make_engine(database_url)
        Base.metadata.create_all(self.engine)

    # -----------------------------------
    # 🔹 Lecture
    # -----------------------------------
    def lookup(self, hashes: Iterable[str], lang: str) -> dict[str, str]:
        """
        Récupère les traductions connues.

        Args:
            hashes: Empreintes recherchées
            lang: Code de la langue cible

        Returns:
            Dictionnaire {empreinte: traduction} limité aux hits. Une
            empreinte absente est un miss, jamais une erreur.
        """
        unique = list(dict.fromkeys(hashes))
        if not unique:
            return {}

        found: dict[str, str] = {}
        try:
            with self.engine.connect() as conn:
                for start in range(0, len(unique), LOOKUP_SLICE):
                    chunk = unique[start : start + LOOKUP_SLICE]
                    stmt = select(
                        TranslationBlock.source_hash, TranslationBlock.content
                    ).where(
                        TranslationBlock.lang == lang,
                        TranslationBlock.source_hash.in_(chunk),
                    )
                    for source_hash, content in conn.execute(stmt):
                        found[source_hash] = content
        except SQLAlchemyError as e:
            # Cache indisponible : tout est traité comme un miss
            logger.warning(f"⚠️ Lecture du cache impossible ({lang}) : {e}")
            return {}

        logger.debug(f"🔍 Cache {lang} : {len(found)}/{len(unique)} hit(s)")
        return found

    def get(self, source_hash: str, lang: str) -> Optional[str]:
        return self.lookup([source_hash], lang).get(source_hash)

    # -----------------------------------
    # 🔹 Écriture
    # -----------------------------------
    def store(self, entries: Mapping[str, str], lang: str) -> None:
        """
        Enregistre de nouvelles traductions (insert-or-ignore).

        Best-effort : une erreur d'écriture est loggée puis ignorée, elle ne
        fait jamais échouer la traduction en cours.

        Args:
            entries: Dictionnaire {empreinte: traduction}
            lang: Code de la langue cible
        """
        if not entries:
            return

        now = datetime.now(timezone.utc).replace(tzinfo=None)
        rows = [
            {
                "source_hash": source_hash,
                "lang": lang,
                "content": content,
                "last_touched": now,
            }
            for source_hash, content in entries.items()
        ]

        try:
            self._insert_ignore(rows)
        except SQLAlchemyError as e:
            error = CacheWriteError(
                f"Écriture de {len(rows)} entrée(s) ({lang}) impossible : {e}"
            )
            logger.warning(f"⚠️ {error}")
            return

        logger.debug(f"💾 Cache {lang} : {len(rows)} entrée(s) soumise(s)")

    def _insert_ignore(self, rows: list[dict]) -> None:
        """INSERT ... ON CONFLICT DO NOTHING selon le dialecte."""
        dialect = self.engine.dialect.name

        if dialect in ("sqlite", "postgresql"):
            insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
            stmt = insert(TranslationBlock).on_conflict_do_nothing(
                index_elements=["source_hash", "lang"]
            )
            with self.engine.begin() as conn:
                conn.execute(stmt, rows)
            return

        # Dialecte sans ON CONFLICT : une transaction par ligne
        for row in rows:
            try:
                with self.engine.begin() as conn:
                    conn.execute(TranslationBlock.__table__.insert(), row)
            except IntegrityError:
                logger.debug(
                    f"Entrée déjà présente ignorée : {row['source_hash'][:12]}…"
                )

    # -----------------------------------
    # 🔹 Maintenance
    # -----------------------------------
    def count(self, lang: Optional[str] = None) -> int:
        """Nombre d'entrées (toutes langues ou une seule)."""
        stmt = select(func.count()).select_from(TranslationBlock)
        if lang is not None:
            stmt = stmt.where(TranslationBlock.lang == lang)
        with self.engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one())

    def clear(self) -> None:
        """
        Supprime toutes les entrées.

        Attention: Cette opération est irréversible.
        """
        with self.engine.begin() as conn:
            conn.execute(delete(TranslationBlock))
