# cli.py
# Interactive admin panel over the HTTP API.
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from app.config import Settings
from app.models import Category
from sdk.adminclient import AdminClient

console = Console()
c = AdminClient(base_url=Settings().api_base_url)

status_message = "Ready"

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Views
# ---------------------------
def show_feedback(view: Dict[str, Any]):
    if view.get("message"):
        console.print(f"[green]{view['message']}[/green]")
    if view.get("error"):
        console.print(f"[red]{view['error']}[/red]")


def show_login(view: Dict[str, Any]):
    console.print(Panel.fit(
        "Sign in with an admin email and password.\n"
        "[dim](Admin accounts are managed in the auth provider console.)[/dim]",
        title=f"🔐 {view.get('title', 'Admin Login')}",
        border_style="cyan",
    ))
    show_feedback(view)


def show_form(form: Dict[str, Any]):
    draft = form.get("draft", {})
    lines = [
        f"[bold]Name:[/bold] {draft.get('name') or '-'}",
        f"[bold]Category:[/bold] {draft.get('category') or '-'}",
        f"[bold]Price:[/bold] {draft.get('price') or '-'}",
        f"[bold]Image URL:[/bold] {draft.get('imageUrl') or draft.get('image_url') or '-'}",
        f"[bold]Description:[/bold] {draft.get('description') or '-'}",
    ]
    style = "yellow" if form.get("mode") == "edit" else "blue"
    console.print(Panel("\n".join(lines), title=f"📝 {form.get('title')}", border_style=style))


def show_products(table_view: Dict[str, Any]):
    rows: List[Dict[str, Any]] = table_view.get("rows", [])
    if not rows:
        console.print(f"[italic yellow]{table_view.get('empty_message') or 'No products'}[/italic yellow]")
        return

    table = Table(
        title=f"📦 {table_view.get('title', 'Existing Products')}",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Category", width=26)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Image", style="dim", overflow="fold", width=30)

    for p in rows:
        table.add_row(p["id"][:12], p["name"], p["category"], p["price"], p["image_url"])
    console.print(table)


def show_view(view: Optional[Dict[str, Any]]):
    if not view:
        return
    if view.get("kind") == "login":
        show_login(view)
        return
    console.print(Panel.fit(f"Welcome, [bold]{view['email']}[/bold]!", title=f"🛠️ {view['title']}"))
    show_feedback(view)
    show_form(view["form"])
    show_products(view["table"])


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner and returns its result.
    Errors are shown in the status panel and yield None.
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
        return result
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def product_completer(view: Dict[str, Any]):
    rows = view.get("table", {}).get("rows", [])
    return WordCompleter([r["id"] for r in rows], ignore_case=True, meta_dict={r["id"]: r["name"] for r in rows})


def ask_product_fields(form: Dict[str, Any]) -> Dict[str, str]:
    draft = form.get("draft", {})
    name = prompt_with_autocomplete("Product name", default=draft.get("name", ""))
    category = prompt_with_autocomplete(
        "🏷️ Category",
        completer=WordCompleter(Category.values(), ignore_case=True, sentence=True),
        default=draft.get("category") or Category.values()[0],
    )
    price = prompt_with_autocomplete("💰 Price (e.g., ₹150.00)", default=draft.get("price", ""))
    image_url = prompt_with_autocomplete("🖼️ Image URL (optional)", default=draft.get("imageUrl", ""))
    description = prompt_with_autocomplete("Description", default=draft.get("description", ""))
    return {
        "name": name.strip(), "category": category.strip(), "price": price.strip(),
        "image_url": image_url.strip(), "description": description.strip(),
    }


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🏪 Storefront Admin",
        "[bold blue]Product administration panel[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def login_menu(view: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    options = Table.grid(padding=(0, 2))
    options.add_column("Key", style="bold cyan", width=4)
    options.add_column("Option", width=30)
    options.add_row("1", "🔐 Login")
    options.add_row("q", "👋 Quit")
    console.print(Panel(options, title="📋 Menu", border_style="yellow"))

    choice = prompt_with_autocomplete("\nChoose an option", completer=WordCompleter(["1", "q"])).strip()
    if choice == "1":
        email = prompt_with_autocomplete("Email")
        password = Prompt.ask("Password", password=True)
        return try_api(c.login, email, password, success_msg="Logged in")
    return _maybe_quit(choice)


def dashboard_menu(view: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    editing = view["form"].get("mode") == "edit"
    options = Table.grid(padding=(0, 2))
    options.add_column("Key", style="bold cyan", width=4)
    options.add_column("Option", width=30)
    options.add_column("Key", style="bold cyan", width=4)
    options.add_column("Option", width=30)
    for row in [
        ("1", "💾 Update product" if editing else "➕ Add product", "5", "🔄 Refresh"),
        ("2", "✏️ Edit product", "6", "🚪 Logout"),
        ("3", "↩️ Cancel edit", "7", "🧹 Reset store"),
        ("4", "🗑️ Delete product", "q", "👋 Quit"),
    ]:
        options.add_row(*row)
    console.print(Panel(options, title="📋 Menu", border_style="yellow"))

    choice = prompt_with_autocomplete(
        "\nChoose an option",
        completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
    ).strip()

    if choice == "1":
        fields = ask_product_fields(view["form"])
        return try_api(c.submit_product, fields["name"], fields["category"], fields["price"],
                       fields["description"], fields["image_url"], success_msg="Product saved")
    if choice == "2":
        pid = prompt_with_autocomplete("Product ID", completer=product_completer(view))
        return try_api(c.edit_product, pid.strip())
    if choice == "3":
        return try_api(c.cancel_edit)
    if choice == "4":
        pid = prompt_with_autocomplete("Product ID", completer=product_completer(view)).strip()
        if Confirm.ask("Are you sure you want to delete this product?"):
            return try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
        return view
    if choice == "5":
        return try_api(c.view)
    if choice == "6":
        return try_api(c.logout, success_msg="Logged out")
    if choice == "7":
        if Confirm.ask("[red]This will clear all data. Continue?[/red]"):
            try_api(c.reset, success_msg="Store reset successfully")
        return try_api(c.view)
    return _maybe_quit(choice)


def _maybe_quit(choice: str):
    if choice.lower() in ("q", "quit", "exit"):
        if Confirm.ask("Are you sure you want to quit?"):
            console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
            sys.exit(0)
    return None


def menu():
    console.clear()
    console.print(create_header())

    view = try_api(c.view)
    while True:
        if view is None:
            view = try_api(c.view) or {"kind": "login"}
        show_view(view)
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        if view.get("kind") == "dashboard":
            view = dashboard_menu(view)
        else:
            view = login_menu(view)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
