"""CLI entry point for the esgpulse news analyzer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

if TYPE_CHECKING:
    from esgpulse.analysis.engine import ArticleAnalyzer
    from esgpulse.config import Settings

console = Console()
logger = logging.getLogger(__name__)

SENTIMENT_COLORS = {"positive": "green", "negative": "red", "neutral": "yellow"}


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """ESG news sentiment and categorization."""
    from esgpulse.config import get_settings
    from esgpulse.log import configure_logging

    configure_logging(get_settings().log_level)


# ---------------------------------------------------------------------------
# analyze — analyze a single article
# ---------------------------------------------------------------------------


@main.command()
@click.option("--title", "-t", required=True, help="Article title")
@click.option("--content", "-c", help="Article body")
@click.option("--file", "-f", "file_path", type=click.Path(exists=True),
              help="Read the article body from a text file")
@click.option("--url", "-u", default="", help="Source URL (used for de-duplication)")
@click.option("--save", is_flag=True, help="Store the article and its analysis")
@click.option("--local", is_flag=True, help="Skip remote inference")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def analyze(
    title: str,
    content: str | None,
    file_path: str | None,
    url: str,
    save: bool,
    local: bool,
    as_json: bool,
) -> None:
    """Analyze one article for sentiment and ESG category."""
    from esgpulse.config import get_settings
    from esgpulse.errors import EsgPulseError
    from esgpulse.ingest import Ingestor, validate_article
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    if file_path:
        content = Path(file_path).read_text()
    if not content:
        raise click.UsageError("Provide --content or --file")

    settings = get_settings()
    analyzer = _build_analyzer(settings, local=local)
    try:
        validate_article(title, content)
        if save:
            with get_session(settings.db_path) as session:
                outcome = Ingestor(analyzer, ArticleStore(session)).ingest(title, content, url=url)
                data = outcome.record.to_dict()
            if outcome.already_exists and not as_json:
                console.print("[yellow]Article already stored; showing saved analysis.[/yellow]")
        else:
            with console.status("[bold green]Analyzing article..."):
                data = analyzer.analyze(title, content).to_dict()
    except EsgPulseError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1)
    finally:
        analyzer.close()

    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        _print_analysis(title, data)


# ---------------------------------------------------------------------------
# fetch — search news and analyze the results
# ---------------------------------------------------------------------------


@main.command()
@click.option("--company", "-c", help="Company name or ticker")
@click.option(
    "--topic",
    "-T",
    type=click.Choice(["environmental", "social", "governance"]),
    help="Restrict general ESG news to one dimension",
)
@click.option("--query", "-q", help="Free-text search instead of ESG feeds")
@click.option("--limit", "-n", default=5, help="Number of articles to fetch")
@click.option("--local", is_flag=True, help="Skip remote inference")
def fetch(
    company: str | None, topic: str | None, query: str | None, limit: int, local: bool
) -> None:
    """Fetch ESG news, analyze new articles and store them."""
    from esgpulse.config import get_settings
    from esgpulse.errors import EsgPulseError
    from esgpulse.ingest import Ingestor
    from esgpulse.news.client import NewsClient
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    news = NewsClient(settings)
    if not news.configured:
        news.close()
        console.print(
            "[bold red]Error:[/bold red] NEWS_API_KEY is not configured. "
            "Add it to your .env file."
        )
        raise SystemExit(1)
    analyzer = _build_analyzer(settings, local=local)

    try:
        with console.status("[green]Fetching news..."):
            if company:
                page = news.fetch_company_news(company, page_size=limit)
            elif query:
                page = news.search(query, page_size=limit)
            else:
                page = news.fetch_esg_news(page_size=limit, topic=topic)

        console.print(f"Fetched {len(page.articles)} of {page.total_results} articles\n")

        with get_session(settings.db_path) as session:
            ingestor = Ingestor(analyzer, ArticleStore(session))
            with console.status("[green]Analyzing articles..."):
                report = ingestor.ingest_batch(page.articles)

            table = Table(title=f"Analyzed {len(report.ingested)} articles")
            table.add_column("ID", width=5, justify="right")
            table.add_column("Title", width=50)
            table.add_column("Sentiment", width=10)
            table.add_column("Category", width=14)
            table.add_column("New", width=4, justify="center")
            for outcome in report.ingested:
                r = outcome.record
                table.add_row(
                    str(r.id),
                    r.title[:50],
                    _sentiment_markup(r.sentiment),
                    r.category,
                    "" if outcome.already_exists else "✓",
                )
    except EsgPulseError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1)
    finally:
        news.close()
        analyzer.close()

    console.print(table)
    if report.skipped:
        console.print(f"[dim]Skipped {len(report.skipped)} articles with too little content[/dim]")
    for title, error in report.errors:
        console.print(f"[red]Failed:[/red] {title[:60]} ({error})")


# ---------------------------------------------------------------------------
# articles / show / delete — browse stored analyses
# ---------------------------------------------------------------------------


@main.command()
@click.option("--sentiment", "-s", type=click.Choice(["positive", "negative", "neutral"]))
@click.option(
    "--category",
    "-C",
    type=click.Choice(["Environmental", "Social", "Governance", "Multiple", "Other"]),
)
@click.option("--limit", "-n", default=20, help="Page size")
@click.option("--skip", default=0, help="Rows to skip")
@click.option(
    "--sort-by",
    type=click.Choice(["analyzed_at", "sentiment_score", "title", "category", "sentiment"]),
    default="analyzed_at",
)
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc")
def articles(
    sentiment: str | None,
    category: str | None,
    limit: int,
    skip: int,
    sort_by: str,
    order: str,
) -> None:
    """List stored articles."""
    from esgpulse.config import get_settings
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    with get_session(settings.db_path) as session:
        page = ArticleStore(session).list(
            sentiment=sentiment,
            category=category,
            limit=limit,
            skip=skip,
            sort_by=sort_by,
            order=order,
        )

        if not page.records:
            console.print("[yellow]No articles found.[/yellow]")
            return

        table = Table(title=f"Articles {skip + 1}-{skip + len(page.records)} of {page.total}")
        table.add_column("ID", width=5, justify="right")
        table.add_column("Title", width=50)
        table.add_column("Sentiment", width=10)
        table.add_column("Score", width=6, justify="right")
        table.add_column("Category", width=14)
        table.add_column("Analyzed", width=16)
        for r in page.records:
            table.add_row(
                str(r.id),
                r.title[:50],
                _sentiment_markup(r.sentiment),
                f"{r.sentiment_score:+.2f}",
                r.category,
                r.analyzed_at.strftime("%Y-%m-%d %H:%M"),
            )
        console.print(table)
        if page.has_more:
            console.print(f"[dim]More results: --skip {skip + limit}[/dim]")


@main.command()
@click.argument("article_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON")
def show(article_id: int, as_json: bool) -> None:
    """Show one stored article."""
    from esgpulse.config import get_settings
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    with get_session(settings.db_path) as session:
        record = ArticleStore(session).get(article_id)
        if record is None:
            console.print(f"[red]Article {article_id} not found.[/red]")
            raise SystemExit(1)
        data = record.to_dict(include_content=True)

    if as_json:
        click.echo(json.dumps(data, indent=2))
    else:
        _print_analysis(data["title"], data)


@main.command()
@click.argument("article_id", type=int)
def delete(article_id: int) -> None:
    """Delete a stored article."""
    from esgpulse.config import get_settings
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    with get_session(settings.db_path) as session:
        if not ArticleStore(session).delete(article_id):
            console.print(f"[red]Article {article_id} not found.[/red]")
            raise SystemExit(1)
    console.print(f"[green]Deleted article {article_id}.[/green]")


# ---------------------------------------------------------------------------
# stats / trends — aggregates over stored analyses
# ---------------------------------------------------------------------------


@main.command()
def stats() -> None:
    """Show sentiment and category distributions."""
    from esgpulse.config import get_settings
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    with get_session(settings.db_path) as session:
        s = ArticleStore(session).stats()

    console.print(
        Panel(
            f"Total articles: [bold]{s.total_articles}[/bold]\n"
            f"Last 7 days: [bold]{s.recent_articles}[/bold]\n"
            f"Average sentiment: [bold]{s.average_sentiment:+.3f}[/bold]",
            title="ESG News Statistics",
        )
    )

    sentiment_table = Table(title="Sentiment")
    sentiment_table.add_column("Label", width=10)
    sentiment_table.add_column("Count", justify="right")
    for label, count in sorted(s.sentiment_distribution.items()):
        sentiment_table.add_row(_sentiment_markup(label), str(count))
    console.print(sentiment_table)

    category_table = Table(title="Categories")
    category_table.add_column("Category", width=14)
    category_table.add_column("Count", justify="right")
    category_table.add_column("Avg sentiment", justify="right")
    for cat, cs in sorted(s.category_distribution.items()):
        category_table.add_row(cat, str(cs.count), f"{cs.avg_sentiment:+.3f}")
    console.print(category_table)


@main.command()
@click.option("--days", "-d", default=30, help="Look-back window in days")
def trends(days: int) -> None:
    """Show daily article counts per ESG category."""
    from esgpulse.analysis.models import EsgCategory
    from esgpulse.config import get_settings
    from esgpulse.storage.database import get_session
    from esgpulse.storage.store import ArticleStore

    settings = get_settings()
    with get_session(settings.db_path) as session:
        points = ArticleStore(session).trends(days=days)

    if not points:
        console.print(f"[yellow]No articles analyzed in the last {days} days.[/yellow]")
        return

    table = Table(title=f"ESG trends, last {days} days")
    table.add_column("Date", width=10)
    for cat in EsgCategory:
        table.add_column(cat.value, justify="right")
    for point in points:
        cells = []
        for cat in EsgCategory:
            cs = point.categories[cat.value]
            cells.append(f"{cs.count} ({cs.avg_sentiment:+.2f})" if cs.count else "-")
        table.add_row(point.date, *cells)
    console.print(table)


# ---------------------------------------------------------------------------
# companies / status
# ---------------------------------------------------------------------------


@main.command()
def companies() -> None:
    """List companies with curated news queries."""
    from esgpulse.news.client import sample_companies

    table = Table(title="Sample companies")
    table.add_column("Name", width=14)
    table.add_column("Ticker", width=8)
    for c in sample_companies():
        table.add_row(c["name"], c["ticker"])
    console.print(table)


@main.command()
def status() -> None:
    """Show which external providers are configured."""
    from esgpulse.config import get_settings

    settings = get_settings()
    for name, configured in (
        ("Inference API (HUGGINGFACE_TOKEN)", bool(settings.huggingface_token)),
        ("News API (NEWS_API_KEY)", bool(settings.news_api_key)),
    ):
        state = "[green]configured[/green]" if configured else "[red]not configured[/red]"
        console.print(f"  {name}: {state}")
    console.print(f"  Database: [dim]{settings.db_path}[/dim]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_analyzer(settings: Settings, *, local: bool = False) -> ArticleAnalyzer:
    """Analyzer backed by the inference API, or local-only if unavailable."""
    from esgpulse.analysis.engine import ArticleAnalyzer
    from esgpulse.errors import ConfigurationError

    if local:
        return ArticleAnalyzer.local_only()
    try:
        return ArticleAnalyzer.from_settings(settings)
    except ConfigurationError as e:
        logger.warning("%s Using local analysis only.", e)
        return ArticleAnalyzer.local_only()


def _sentiment_markup(label: str) -> str:
    color = SENTIMENT_COLORS.get(label, "white")
    return f"[{color}]{label}[/{color}]"


def _print_analysis(title: str, data: dict) -> None:
    scores = data["esgScores"]
    console.print()
    console.print(
        Panel(
            f"[bold]{title}[/bold]\n\n{data['summary']}",
            subtitle=f"{data['category']} | {_sentiment_markup(data['sentiment'])} "
            f"({data['sentimentScore']:+.2f})",
        )
    )
    table = Table(show_header=False, box=None)
    table.add_column(width=14)
    table.add_column(justify="right")
    for dim in ("environmental", "social", "governance"):
        table.add_row(dim.capitalize(), f"{scores[dim]:.2f}")
    console.print(table)
    console.print(f"\n[dim]Keywords: {', '.join(data['keywords'])}[/dim]")
