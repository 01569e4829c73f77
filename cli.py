# cli.py - interactive token-shop console with autocomplete
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.shopclient import ShopClient

console = Console()
c = ShopClient()


# Global state for status messages and autocomplete
status_message = "Ready"
address_cache = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Small utility to unwrap API responses (buy() returns a Response object)
# ---------------------------
def _unwrap_resp(resp: Any) -> Any:
    if resp is None:
        return None
    if hasattr(resp, "status_code"):
        try:
            return resp.json()
        except ValueError:
            return {"detail": f"HTTP {resp.status_code}: {resp.text}"}
    return resp


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], shop: str):
    if not products:
        console.print("[italic yellow]No products listed[/italic yellow]")
        return

    table = Table(
        title=f"📦 Products of {shop[:10]}...",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", justify="right", width=6)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Stock", justify="right", width=8)
    table.add_column("Prices", width=56)

    for p in products:
        prices = "\n".join(f"{tok}: {price}" for tok, price in p.get("prices", {}).items()) or "[dim]none[/dim]"
        table.add_row(str(p.get("id")), p.get("name", ""), str(p.get("stock", 0)), prices)
    console.print(table)


def show_receipt(receipt: Dict[str, Any]):
    table = Table(box=box.SIMPLE, header_style="bold blue")
    table.add_column("Event", style="bold", width=18)
    table.add_column("Args")
    for log in receipt.get("logs", []):
        args = ", ".join(f"{k}={v}" for k, v in log.get("args", {}).items())
        table.add_row(log.get("event", "?"), args)
    title = f"🧾 tx {receipt.get('tx_hash', '')[:14]}... on {receipt.get('contract', '')[:10]}..."
    console.print(Panel(table, title=title, border_style="blue"))


def show_events(events: List[Dict[str, Any]]):
    if not events:
        console.print("[italic yellow]No events[/italic yellow]")
        return
    table = Table(title="📜 Event log", box=box.ROUNDED, header_style="bold yellow", show_lines=True)
    table.add_column("Contract", style="dim", width=14)
    table.add_column("Event", width=18)
    table.add_column("Args")
    for e in events:
        args = ", ".join(f"{k}={v}" for k, v in e.get("args", {}).items())
        table.add_row(e.get("contract", "")[:12] + "...", e.get("event", ""), args)
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def _error_detail(e: Exception) -> str:
    """Prefer the API's {"detail": ...} over the raw HTTPError text."""
    response = getattr(e, "response", None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("detail"):
            return f"HTTP {response.status_code}: {body['detail']}"
    return str(e)


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the raw result, or None after printing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {_error_detail(e)}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def ask_address(message: str) -> str:
    completer = WordCompleter(sorted(address_cache), ignore_case=True)
    value = prompt(f"{message} ", completer=completer, style=custom_style).strip()
    if value:
        address_cache.add(value)
    return value


def ask_text(message: str, default: str = "") -> str:
    return prompt(f"{message} ", style=custom_style, default=default).strip()


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🪙 token-shop",
        "[bold blue]Ledger console with autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    c.caller = ask_address("Act as (your 0x address):") or None

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "🏪 Deploy shop", "7", "🪙 Deploy token"),
            ("2", "➕ Add product", "8", "✅ Approve spender"),
            ("3", "🏷️ Set price", "9", "👛 Token balance"),
            ("4", "📦 List products", "10", "📜 Event log"),
            ("5", "ℹ️ Product / price", "11", "👤 Switch caller"),
            ("6", "🛒 Buy with tokens", "12", "🔄 Reset ledger"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title=f"📋 Menu (caller: {c.caller or 'none'})", border_style="yellow"))

        choice = prompt(
            "\nChoose an option ",
            completer=WordCompleter([str(i) for i in range(1, 13)] + ["q", "quit", "exit"]),
            style=custom_style
        ).strip()

        if choice == "1":
            shop = try_api(c.deploy_shop, success_msg="Shop deployed")
            if shop:
                address_cache.add(shop)
                console.print(Panel(f"Shop address: [green]{shop}[/green]"))

        elif choice == "2":
            shop = ask_address("Shop address:")
            pid = IntPrompt.ask("Product ID", default=0)
            name = ask_text("Product name:")
            stock = IntPrompt.ask("📦 Stock", default=1)
            resp = try_api(c.add_product, shop, pid, name, stock, success_msg=f"Product '{name}' listed")
            if resp:
                show_receipt(resp)

        elif choice == "3":
            shop = ask_address("Shop address:")
            pid = IntPrompt.ask("Product ID", default=0)
            token = ask_address("Token address:")
            price = IntPrompt.ask("💰 Price (token units, 0 clears)", default=0)
            resp = try_api(c.set_price, shop, pid, token, price, success_msg=f"Price set for product {pid}")
            if resp:
                show_receipt(resp)

        elif choice == "4":
            shop = ask_address("Shop address:")
            available = Confirm.ask("Only products in stock?", default=False)
            products = try_api(c.list_products, shop, available, success_msg="Products loaded")
            if products is not None:
                show_products(products, shop)

        elif choice == "5":
            shop = ask_address("Shop address:")
            pid = IntPrompt.ask("Product ID", default=0)
            product = try_api(c.product, shop, pid)
            if product:
                console.print(product)
            token = ask_address("Token address (blank to skip):")
            if token:
                price = try_api(c.get_product_price, shop, pid, token)
                console.print(f"Price: [bold]{price}[/bold]")

        elif choice == "6":
            shop = ask_address("Shop address:")
            pid = IntPrompt.ask("Product ID", default=0)
            token = ask_address("Token address:")
            amount = IntPrompt.ask("Amount to pay", default=0)
            raw = try_api(c.buy, shop, c.caller, amount, token, pid)
            resp = _unwrap_resp(raw)
            if not resp:
                continue
            if raw.status_code == 200:
                status_message = f"Bought product {pid}"
                show_receipt(resp)
            else:
                status_message = f"Error: purchase failed ({resp.get('detail')})"
                console.print(Panel.fit(f"[red]Purchase failed:[/red] {resp.get('detail')}", title="❌ Purchase Failed"))

        elif choice == "7":
            name = ask_text("Token name:", default="Shop Token")
            symbol = ask_text("Symbol:", default="ST")
            decimals = IntPrompt.ask("Decimals", default=18)
            supply = IntPrompt.ask("Initial supply", default=10000)
            token = try_api(c.deploy_token, supply, name, decimals, symbol, success_msg=f"Token {symbol} deployed")
            if token:
                address_cache.add(token)
                console.print(Panel(f"Token address: [green]{token}[/green]"))

        elif choice == "8":
            token = ask_address("Token address:")
            spender = ask_address("Spender (shop) address:")
            value = IntPrompt.ask("Allowance", default=0)
            resp = try_api(c.approve, token, spender, value, success_msg="Allowance granted")
            if resp:
                show_receipt(resp)

        elif choice == "9":
            token = ask_address("Token address:")
            owner = ask_address("Holder address:") or c.caller
            balance = try_api(c.balance_of, token, owner)
            if balance is not None:
                console.print(Panel.fit(f"💰 [bold]Balance:[/bold] [green]{balance}[/green]", title=f"👛 {owner}"))

        elif choice == "10":
            contract = ask_address("Contract address (blank for all):")
            events = try_api(c.events, contract or None, success_msg="Events loaded")
            if events is not None:
                show_events(events)

        elif choice == "11":
            c.caller = ask_address("Act as (0x address):") or None
            status_message = f"Now acting as {c.caller}"

        elif choice == "12":
            if Confirm.ask("[red]This will clear all contracts. Continue?[/red]"):
                try_api(c.reset, success_msg="Ledger reset")
                address_cache.clear()

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
