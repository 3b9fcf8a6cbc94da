"""
Point d'entrée en ligne de commande de wiki-translator.

Commandes :
- translate : traduction stricte d'un fichier HTML
- skeleton  : squelette à placeholders d'un fichier HTML
- fill      : remplissage d'un squelette via une API en cours d'exécution
- serve     : lancement de l'API HTTP (Flask)
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from .api import build_translator, create_app
from .config import Limits, Settings
from .delivery import DeliveryScheduler, HttpBatchTransport
from .exceptions import TranslatorError
from .htmlpage import HtmlPage
from .logger import get_logger

logger = get_logger(__name__)

app = typer.Typer(
    name="wiki-translator",
    help="🌐 Traduction de pages wiki rendues via LLM.",
    add_completion=False,
    no_args_is_help=True,
)

LANG_OPTION = Annotated[
    str, typer.Option("--lang", "-l", help="Code de la langue cible (ex: es).")
]
OUTPUT_OPTION = Annotated[
    Optional[Path],
    typer.Option("--output", "-o", help="Fichier de sortie (stdout si absent)."),
]
SOURCE_ARGUMENT = Annotated[
    Path, typer.Argument(exists=True, dir_okay=False, readable=True)
]


def _write(html: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(html)
    else:
        output.write_text(html, encoding="utf-8")
        typer.echo(f"✅ Écrit : {output}", err=True)


@app.command("translate")
def translate(source: SOURCE_ARGUMENT, lang: LANG_OPTION, output: OUTPUT_OPTION = None) -> None:
    """Traduit un fichier HTML (échoue si une unité reste non traduite)."""
    settings = Settings.from_env()
    translator = build_translator(settings)
    try:
        html = translator.translate_html(source.read_text(encoding="utf-8"), lang)
    except TranslatorError as e:
        typer.secho(f"❌ Traduction impossible : {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    _write(html, output)


@app.command("skeleton")
def skeleton(source: SOURCE_ARGUMENT, lang: LANG_OPTION, output: OUTPUT_OPTION = None) -> None:
    """Produit le squelette à placeholders d'un fichier HTML."""
    settings = Settings.from_env()
    page = HtmlPage.from_html(source.read_text(encoding="utf-8"))
    _, units, placeholders = page.skeleton(lang, settings.article_path)
    typer.echo(
        f"🔍 {len(placeholders)} placeholder(s), {len(units)} unité(s)", err=True
    )
    _write(page.to_html(), output)


@app.command("fill")
def fill(
    source: SOURCE_ARGUMENT,
    lang: LANG_OPTION,
    server: Annotated[
        str, typer.Option("--server", "-s", help="URL de base de l'API (préfixe inclus).")
    ],
    output: OUTPUT_OPTION = None,
    chunk_size: Annotated[int, typer.Option(min=1)] = Limits.chunk_size,
    max_concurrent: Annotated[int, typer.Option(min=1)] = Limits.max_concurrent,
) -> None:
    """Remplit un squelette en interrogeant l'API par batches."""
    page = HtmlPage.from_html(source.read_text(encoding="utf-8"))
    scheduler = DeliveryScheduler(
        page,
        HttpBatchTransport(server, page_title=source.stem),
        lang,
        chunk_size=chunk_size,
        max_concurrent=max_concurrent,
        show_progress=True,
    )
    report = scheduler.run()
    _write(page.to_html(), output)

    typer.echo(
        f"📊 {report.applied} appliqué(s), {report.failed} échec(s), "
        f"{report.mismatched} non résolu(s), {report.undecodable} illisible(s)",
        err=True,
    )
    if not report.complete:
        raise typer.Exit(code=1)


@app.command("serve")
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port d'écoute.")] = 5000,
    debug: Annotated[bool, typer.Option(help="Mode debug Flask.")] = False,
) -> None:
    """Lance l'API HTTP."""
    flask_app = create_app()
    logger.info(f"🚀 Écoute sur {host}:{port}")
    flask_app.run(host=host, port=port, debug=debug)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
