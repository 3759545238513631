"""Bigbank connector CLI application using Typer.

Logs in interactively (customer ID, password, SMS mTAN) and prints the
accounts, balances and transactions.
"""

import asyncio
import json
import logging
import sys
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from bigbank.application.commands import AccountRefreshCommand, BankConnectionCommand
from bigbank.application.dtos import AccountInfo, ConnectionResult, RefreshResult
from bigbank.domain.banking.value_objects import AuthChallenge, BankCredentials
from bigbank.domain.shared.exceptions import ErrorCode
from bigbank.domain.shared.time import today_in
from bigbank_config.settings import get_settings

app = typer.Typer(
    name="bigbank",
    help="Bigbank connector - balances and transactions from Bigbank Germany",
    no_args_is_help=True,
)
console = Console()


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Configure logging once per process.

    - Console output with timestamps and module names
    - Configurable log level for bigbank modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("bigbank").setLevel(log_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _prompt_tan(challenge: AuthChallenge) -> str:
    console.print(f"\n[bold]{challenge.title}[/bold]")
    console.print(challenge.challenge_text)
    return typer.prompt(challenge.label)


def _print_connection_error(result: ConnectionResult) -> None:
    console.print(
        f"[red]✗ {result.error_message}[/red] [dim]({result.error_code})[/dim]",
    )


def _print_accounts(accounts: list[AccountInfo]) -> None:
    table = Table(title="Accounts")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Account number")
    table.add_column("Owner")
    table.add_column("Currency")
    for account in accounts:
        table.add_row(
            account.account_id,
            account.account_name,
            account.account_number,
            account.owner,
            account.currency,
        )
    console.print(table)


def _print_refresh(account: AccountInfo, result: RefreshResult) -> None:
    if not result.success:
        console.print(
            f"[red]✗ {account.account_name} ({account.account_id}): "
            f"{result.error_message}[/red]"
        )
        return

    balance = (
        f"{result.balance} {result.currency}"
        if result.balance is not None
        else "[yellow]unknown[/yellow]"
    )
    console.print(
        f"\n[bold]{account.account_name}[/bold] {account.account_number}"
        f"  Balance: {balance}"
    )

    table = Table(
        caption=f"{result.start_date} to {result.end_date}, "
        f"{result.transactions_count} transactions",
    )
    table.add_column("Booked")
    table.add_column("Value")
    table.add_column("Name")
    table.add_column("Purpose")
    table.add_column("Amount", justify="right")
    for tx in result.transactions:
        style = None if tx.booked else "dim"
        table.add_row(
            str(tx.booking_date or ""),
            str(tx.value_date or ""),
            tx.name,
            tx.purpose,
            f"{tx.amount} {tx.currency}",
            style=style,
        )
    console.print(table)


def _credentials(customer_id: str, password: str) -> Optional[BankCredentials]:
    try:
        return BankCredentials.from_plain(customer_id, password)
    except ValidationError as e:
        message = "; ".join(
            error["msg"].removeprefix("Value error, ") for error in e.errors()
        )
        console.print(
            f"[red]✗ {message}[/red] [dim]({ErrorCode.VALIDATION_ERROR.value})[/dim]",
        )
        return None


async def _run_accounts(customer_id: str, password: str) -> int:
    credentials = _credentials(customer_id, password)
    if credentials is None:
        return 1

    command = BankConnectionCommand.from_settings()
    try:
        result = await command.execute(credentials, tan_callback=_prompt_tan)
        if not result.success:
            _print_connection_error(result)
            return 1
        if result.warning_message:
            console.print(f"[yellow]{result.warning_message}[/yellow]")
        _print_accounts(result.accounts)
        return 0
    finally:
        await command.adapter.disconnect()


async def _run_refresh(
    customer_id: str,
    password: str,
    since: date,
    account_id: Optional[str],
    as_json: bool,
) -> int:
    credentials = _credentials(customer_id, password)
    if credentials is None:
        return 1

    command = BankConnectionCommand.from_settings()
    try:
        result = await command.execute(credentials, tan_callback=_prompt_tan)
        if not result.success:
            _print_connection_error(result)
            return 1

        accounts = [
            acc
            for acc in result.accounts
            if account_id is None or acc.account_id == account_id
        ]
        if not accounts:
            console.print("[yellow]No matching accounts[/yellow]")
            return 1

        refresher = AccountRefreshCommand(command.adapter)
        outputs = []
        exit_code = 0
        for account in accounts:
            refreshed = await refresher.execute(account, since)
            if not refreshed.success:
                exit_code = 1
            if as_json:
                outputs.append(refreshed.to_dict())
            else:
                _print_refresh(account, refreshed)

        if as_json:
            typer.echo(json.dumps(outputs, indent=2, ensure_ascii=False))
        return exit_code
    finally:
        await command.adapter.disconnect()


@app.command("accounts")
def accounts(
    customer_id: str = typer.Option(
        ...,
        envvar="BIGBANK_CUSTOMER_ID",
        prompt="Customer ID",
        help="Bigbank customer ID",
    ),
    password: str = typer.Option(
        ...,
        envvar="BIGBANK_PASSWORD",
        prompt=True,
        hide_input=True,
        help="Portal password",
    ),
) -> None:
    """Log in and list all accounts."""
    _configure_logging()
    raise typer.Exit(code=asyncio.run(_run_accounts(customer_id, password)))


@app.command("refresh")
def refresh(
    customer_id: str = typer.Option(
        ...,
        envvar="BIGBANK_CUSTOMER_ID",
        prompt="Customer ID",
        help="Bigbank customer ID",
    ),
    password: str = typer.Option(
        ...,
        envvar="BIGBANK_PASSWORD",
        prompt=True,
        hide_input=True,
        help="Portal password",
    ),
    since: Optional[datetime] = typer.Option(
        None,
        formats=["%Y-%m-%d"],
        help="Fetch transactions since this date (default: 90 days ago)",
    ),
    account_id: Optional[str] = typer.Option(
        None,
        "--account",
        help="Only refresh the account with this ID",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Log in and print balance and transactions of each account."""
    _configure_logging()
    settings = get_settings()
    since_date = (
        since.date()
        if since is not None
        else today_in(settings.tzinfo) - timedelta(days=90)
    )
    raise typer.Exit(
        code=asyncio.run(
            _run_refresh(customer_id, password, since_date, account_id, as_json),
        ),
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
