"""Operator CLI for TaskHub.

Usage:
    taskhub create-super-admin --email root@example.com --full-name "Root"
    taskhub init-db
    taskhub plans
"""

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.orm import Session

from app.core.auth.password import check_password_length, hash_password
from app.core.db.session import Base, SessionLocal, engine
from app.core.db.transaction import atomic
from app.core.plans import PLAN_LIMITS
from app.models import User, UserRole
from app.repositories.user_repository import UserRepository

app = typer.Typer(
    name="taskhub",
    help="TaskHub operator tools",
    add_completion=False,
)
console = Console()


def ensure_super_admin(db: Session, email: str, full_name: str, password: str) -> tuple[User, bool]:
    """
    Create the tenant-less super admin unless one with this email exists.

    Returns:
        The user and whether it was created by this call.
    """
    email = email.strip().lower()
    repository = UserRepository(db)
    existing = repository.get_super_admin_by_email(email)
    if existing is not None:
        return existing, False

    with atomic(db):
        user = repository.create(
            {
                "tenant_id": None,
                "email": email,
                "password_hash": hash_password(password),
                "full_name": full_name,
                "role": UserRole.SUPER_ADMIN.value,
                "is_active": True,
            }
        )
    return user, True


@app.command("create-super-admin")
def create_super_admin(
    email: str = typer.Option(..., "--email", "-e", help="Login email"),
    full_name: str = typer.Option("Super Admin", "--full-name", "-n", help="Display name"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Create the platform super admin. Running it twice is harmless."""
    if len(password) < 8:
        console.print("[red]✗ Password must be at least 8 characters[/red]")
        raise typer.Exit(1)
    try:
        check_password_length(password)
    except ValueError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1) from e

    db = SessionLocal()
    try:
        user, created = ensure_super_admin(db, email, full_name, password)
        if created:
            console.print(f"[green]✓ Super admin created: {user.email} (ID: {user.id})[/green]")
        else:
            console.print(f"[yellow]Super admin {user.email} already exists, nothing to do[/yellow]")
    finally:
        db.close()


@app.command("init-db")
def init_db() -> None:
    """Create all tables from the ORM models. Use alembic for real deployments."""
    console.print("\n[bold cyan]Creating tables...[/bold cyan]")
    Base.metadata.create_all(bind=engine)
    for table in Base.metadata.sorted_tables:
        console.print(f"  • {table.name}")
    console.print("[green]✓ Database initialized[/green]")


@app.command()
def plans() -> None:
    """Show the user and project limits of each subscription plan."""
    table = Table(title="Subscription plans")
    table.add_column("Plan", style="cyan")
    table.add_column("Max users", justify="right")
    table.add_column("Max projects", justify="right")
    for plan, limits in PLAN_LIMITS.items():
        table.add_row(plan, str(limits.max_users), str(limits.max_projects))
    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
