"""
Fretes CLI

Command-line admin client for the shipping-management backend.
"""

import asyncio
import logging
import sys
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import settings
from ..errors import ShippingError
from ..models import Package, PackageStatus
from ..services import ReferenceDataLoader, normalize_state
from ..session import AdminSession

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

app = typer.Typer(
    name="fretes",
    help="Fretes: shipping management admin client",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")

STATUS_STYLES = {
    "criado": "blue",
    "esperando_coleta": "yellow",
    "coletado": "dark_orange",
    "enviado": "magenta",
    "entregue": "green",
    "extraviado": "red",
}


@app.callback()
def main_options(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Shipping API base URL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Fretes: manage packages, quotes and carrier hiring."""
    logging.basicConfig(
        level="DEBUG" if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = {"base_url": base_url or settings.API_BASE_URL}


def _run(ctx: typer.Context, action: Callable[[AdminSession], Awaitable[T]]) -> T:
    """Run an action against a fresh session, reporting API errors."""

    async def runner() -> T:
        async with AdminSession(base_url=ctx.obj["base_url"]) as session:
            return await action(session)

    try:
        return asyncio.run(runner())
    except ShippingError as e:
        console.print(f"[red]Erro: {e.message}[/red]")
        raise typer.Exit(1)


def _status_text(package: Package) -> str:
    style = STATUS_STYLES.get(package.status or "", "white")
    return f"[{style}]{package.status_label}[/{style}]"


def _package_table(title: str, packages: list[Package], reference: ReferenceDataLoader) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Código", style="cyan")
    table.add_column("Produto")
    table.add_column("Peso", justify="right")
    table.add_column("UF", width=4)
    table.add_column("Status")
    table.add_column("Transportadora")
    table.add_column("Preço", justify="right", style="green")
    table.add_column("Prazo", justify="right")

    for pkg in packages:
        table.add_row(
            pkg.id or "?",
            pkg.tracking_code or "?",
            pkg.product or "?",
            f"{pkg.weight_kg}kg" if pkg.weight_kg is not None else "?",
            pkg.destination_state or "?",
            _status_text(pkg),
            reference.carrier_name(pkg.carrier_id) if pkg.is_hired else "-",
            f"R$ {pkg.contracted_price}" if pkg.contracted_price else "-",
            f"{pkg.contracted_days} dias" if pkg.contracted_days else "-",
        )
    return table


def _package_panel(package: Package, reference: ReferenceDataLoader) -> Panel:
    lines = [
        f"Produto: [white]{package.product or '?'}[/white]",
        f"Código de Rastreamento: [cyan]{package.tracking_code or '?'}[/cyan]",
        f"Peso: {package.weight_kg}kg",
        f"Estado de Destino: {package.destination_state or '?'}",
        f"Status: {_status_text(package)}",
    ]
    if package.is_hired:
        lines.append(f"Transportadora: {reference.carrier_name(package.carrier_id)}")
        if package.contracted_price:
            lines.append(f"Preço Contratado: R$ {package.contracted_price}")
        if package.contracted_days:
            lines.append(f"Prazo Contratado: {package.contracted_days} dias")
    lines.append(
        f"Criado em: {package.created_at.strftime('%d/%m/%Y %H:%M') if package.created_at else 'N/A'}"
    )
    lines.append(
        f"Última Atualização: "
        f"{package.updated_at.strftime('%d/%m/%Y %H:%M') if package.updated_at else 'N/A'}"
    )
    return Panel("\n".join(lines), title="Detalhes do Pacote")


# =============================================================================
# Package Commands
# =============================================================================

@app.command()
def packages(ctx: typer.Context):
    """
    List all packages.

    Packages are shown in the order the backend returns them.
    """

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        packages_list = await session.directory.refresh()

        if not packages_list:
            console.print("[yellow]Nenhum pacote encontrado.[/yellow]")
            return

        console.print(_package_table(
            f"Pacotes (total: {len(packages_list)})", packages_list, session.reference
        ))

    _run(ctx, action)


@app.command()
def show(
    ctx: typer.Context,
    package_id: str = typer.Argument(..., help="Package ID"),
):
    """Show the details of a package."""

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        package = await session.directory.fetch_detail(package_id)
        if package is None:
            console.print(f"[red]Pacote não encontrado: {package_id}[/red]")
            raise typer.Exit(1)
        console.print(_package_panel(package, session.reference))

    _run(ctx, action)


@app.command()
def track(
    ctx: typer.Context,
    tracking_code: str = typer.Argument(..., help="Tracking code"),
):
    """Look up a package by tracking code."""

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        package = await session.directory.track(tracking_code)
        if package is None:
            console.print(
                "[yellow]Pacote não encontrado: nenhum pacote com este código de rastreamento.[/yellow]"
            )
            raise typer.Exit(1)
        console.print(_package_panel(package, session.reference))

    _run(ctx, action)


@app.command()
def create(
    ctx: typer.Context,
    product: str = typer.Option(..., "--product", "-p", help="Product description"),
    weight: float = typer.Option(..., "--weight", "-w", help="Weight in kg"),
    state: str = typer.Option(..., "--state", "-s", help="Destination state code (UF)"),
):
    """Create a package."""

    async def action(session: AdminSession) -> None:
        created = await session.directory.create_package(product, weight, state)
        code = created.tracking_code if created else None
        console.print("[green]Pacote criado com sucesso.[/green]")
        if code:
            console.print(f"Código de rastreamento: [cyan]{code}[/cyan]")
        console.print(f"[dim]Total de pacotes: {len(session.directory)}[/dim]")

    _run(ctx, action)


@app.command()
def status(
    ctx: typer.Context,
    package_id: str = typer.Argument(..., help="Package ID"),
    new_status: PackageStatus = typer.Argument(..., help="New status"),
):
    """Update the status of a package."""

    async def action(session: AdminSession) -> None:
        await session.directory.update_status(package_id, new_status)
        console.print(f"[green]Status atualizado para {new_status.label}.[/green]")

    _run(ctx, action)


# =============================================================================
# Reference Data Commands
# =============================================================================

@app.command()
def carriers(ctx: typer.Context):
    """List carriers."""

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        if not session.reference.carriers:
            console.print("[yellow]Nenhuma transportadora encontrada.[/yellow]")
            return

        table = Table(title="Transportadoras")
        table.add_column("ID", style="dim")
        table.add_column("Nome", style="cyan")
        for carrier in session.reference.carriers:
            table.add_row(carrier.id or "?", carrier.name or "?")
        console.print(table)

    _run(ctx, action)


@app.command()
def states(ctx: typer.Context):
    """List destination states."""

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        if not session.reference.states:
            console.print("[yellow]Nenhum estado encontrado.[/yellow]")
            return

        table = Table(title="Estados")
        table.add_column("UF", style="cyan", width=4)
        table.add_column("Nome")
        table.add_column("Região", style="dim")
        for state in session.reference.states:
            table.add_row(state.code or "?", state.name or "?", state.region_name or "?")
        console.print(table)

    _run(ctx, action)


# =============================================================================
# Quote & Hire Commands
# =============================================================================

@app.command()
def quotes(
    ctx: typer.Context,
    state: str = typer.Option(..., "--state", "-s", help="Destination state code (UF)"),
    weight: float = typer.Option(..., "--weight", "-w", help="Weight in kg"),
):
    """Compare freight quotes from every carrier."""

    async def action(session: AdminSession) -> None:
        quote_list = await session.quotes.lookup(state, weight)
        if not quote_list:
            console.print(
                "[yellow]Nenhuma cotação encontrada para os parâmetros informados.[/yellow]"
            )
            return

        table = Table(title=f"Cotações para {normalize_state(state)} ({weight}kg)")
        table.add_column("Transportadora", style="cyan")
        table.add_column("Preço", justify="right", style="green")
        table.add_column("Prazo", justify="right")
        for quote in quote_list:
            table.add_row(
                quote.carrier_name or "?",
                f"R$ {quote.price_text}" if quote.estimated_price is not None else "?",
                f"{quote.estimated_days} dias" if quote.estimated_days is not None else "?",
            )
        console.print(table)

    _run(ctx, action)


@app.command()
def hireable(ctx: typer.Context):
    """List packages that have no carrier hired yet."""

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        await session.directory.refresh()
        candidates = session.hire_workflow().candidates
        if not candidates:
            console.print(
                "[yellow]Nenhum pacote disponível: todos já possuem transportadora contratada "
                "ou não há pacotes cadastrados.[/yellow]"
            )
            return
        console.print(_package_table("Pacotes sem transportadora", candidates, session.reference))

    _run(ctx, action)


@app.command()
def hire(
    ctx: typer.Context,
    package_id: str = typer.Argument(..., help="Package ID"),
    carrier_id: str = typer.Argument(..., help="Carrier ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Hire without asking for confirmation"),
):
    """
    Hire a carrier for a package.

    Fetches the carrier's quote for the package's destination and weight,
    shows it, and hires the carrier at that price and lead time.
    """

    async def action(session: AdminSession) -> None:
        await session.reference.load()
        await session.directory.refresh()
        workflow = session.hire_workflow()

        await workflow.select_package(package_id)
        console.print("[dim]Buscando cotação...[/dim]")
        await workflow.select_carrier(carrier_id)

        if not workflow.can_submit:
            console.print(
                f"[yellow]Nenhuma cotação de {workflow.selected_carrier} "
                f"para este pacote.[/yellow]"
            )
            raise typer.Exit(1)

        quote = workflow.resolved_quote
        console.print(Panel.fit(
            f"Pacote: [white]{workflow.selected_package}[/white]\n"
            f"Transportadora: [cyan]{workflow.selected_carrier}[/cyan]\n"
            f"Preço: [green]R$ {quote.price_text}[/green]\n"
            f"Prazo: {quote.estimated_days} dias",
            title="Resumo da Contratação",
        ))

        if not yes and not await asyncio.to_thread(typer.confirm, "Contratar transportadora?"):
            console.print("[dim]Contratação cancelada.[/dim]")
            return

        await workflow.submit()
        console.print("[green]Transportadora contratada com sucesso.[/green]")

    _run(ctx, action)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold]{settings.APP_NAME}[/bold] v{settings.APP_VERSION}")
    console.print(f"API: {settings.API_BASE_URL}")


# =============================================================================
# Entry Point
# =============================================================================

def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
