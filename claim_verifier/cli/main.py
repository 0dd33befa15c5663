"""Command-line interface for the claim verifier using Typer and Rich."""

import asyncio
import json
import time

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from claim_verifier import __version__
from claim_verifier.agents.verification.schemas import Verdict, VerificationResult
from claim_verifier.config.logging import get_logger
from claim_verifier.config.settings import settings
from claim_verifier.pipeline.verification_pipeline import ClaimVerificationPipeline

app = typer.Typer(
    help="Claim Verifier CLI - multi-source fact-checking of free-text claims",
    add_completion=False,
)

console = Console()

logger = get_logger("cli")

VERDICT_STYLES = {
    Verdict.TRUE: "green",
    Verdict.FALSE: "red",
    Verdict.PARTIALLY_TRUE: "yellow",
    Verdict.UNVERIFIED: "dim",
}


def _configured(value) -> str:
    return "✓ Configured" if value else "⚠ Not Configured"


@app.command()
def status() -> None:
    """
    Display configured providers and verification settings.
    """
    logger.info("Displaying system status")

    table = Table(title="Claim Verifier Status", show_header=True, header_style="bold magenta")
    table.add_column("Component", style="cyan", width=20)
    table.add_column("Status", style="green", width=18)
    table.add_column("Details", style="yellow")

    table.add_row("Gemini", _configured(settings.gemini_api_key), settings.gemini_model)
    table.add_row("HuggingFace", _configured(settings.hf_token), settings.hf_model)
    table.add_row("Primary LLM", "✓ Active", settings.primary_llm)
    table.add_row("SerpAPI News", _configured(settings.serpapi_key), settings.serpapi_search_engine)
    table.add_row(
        "RapidAPI",
        _configured(settings.rapidapi_key or settings.rapidapi_realtime_key),
        "Google, Bing web/news, Real-Time News",
    )
    table.add_row("Tavily", _configured(settings.tavily_api_key), "advanced search")
    table.add_row(
        "Knowledge Store",
        "✓ Configured",
        f"chroma://{settings.chroma_host}:{settings.chroma_port}/{settings.chroma_collection_name}",
    )
    table.add_row("Trust Threshold", "✓ Active", str(settings.trust_score_threshold))
    table.add_row(
        "Logging",
        "✓ Active",
        f"Level: {settings.log_level}, Format: {settings.log_format}",
    )

    console.print(table)


async def _verify(claim: str) -> VerificationResult:
    async with await ClaimVerificationPipeline.create() as pipeline:
        return await pipeline.verify_claim(claim)


def render_result(result: VerificationResult) -> None:
    """Print a verification result as a Rich panel plus citation table."""
    style = VERDICT_STYLES.get(result.verdict, "white")
    body = f"[bold {style}]{result.verdict.value}[/bold {style}] ({result.confidence}% confidence)\n\n"
    body += result.explanation
    if result.corrected_info:
        body += f"\n\n[bold]Correction:[/bold] {result.corrected_info}"

    console.print(Panel(body, title=f'"{result.claim}"', border_style=style))

    if result.sources:
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Source", style="cyan")
        table.add_column("Title")
        table.add_column("URL", style="dim")
        for citation in result.sources:
            table.add_row(citation.source, citation.title, citation.url)
        console.print(table)

    console.print(
        f"[dim]Evidence used: {result.sources_found} "
        f"(candidates: {result.candidates_found}, verified: {result.verified_count})[/dim]"
    )


@app.command()
def verify(
    claim: str = typer.Argument(..., help="Claim to verify"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """
    Verify a claim against live news search and background knowledge.

    Args:
        claim: Free-text factual claim
        as_json: Emit the camelCase JSON result instead of a panel
    """
    logger.info(f"Verifying claim: {claim[:80]}")

    start_time = time.time()
    result = asyncio.run(_verify(claim))
    elapsed = time.time() - start_time

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        render_result(result)
        console.print(f"[dim]Completed in {elapsed:.2f}s[/dim]")

    logger.info(
        f"Claim verified: {result.verdict.value} ({result.confidence}) in {elapsed:.2f}s"
    )
    if result.is_failure:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Display version information."""
    console.print("[bold]Claim Verifier[/bold]")
    console.print(f"Version: {__version__}")


if __name__ == "__main__":
    app()
