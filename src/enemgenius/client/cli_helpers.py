"""Shared output and database checks for the enemgenius CLI commands."""

from typing import NoReturn

import click

from enemgenius.models import KnowledgeFile, Question
from enemgenius.service.database import (
    RavenDBConfig,
    collection_counts,
    create_database,
    database_exists,
)


def abort(message: str, *details: str) -> NoReturn:
    """Print a ✗ error line (plus any detail lines) to stderr and stop the command."""
    click.echo(f"✗ {message}", err=True)
    for detail in details:
        click.echo(detail, err=True)
    raise click.Abort()


def ensure_database_exists(
    create_if_missing: bool = False,
    directory: str | None = None,
) -> bool:
    """Make sure the RavenDB database is there before a command touches it.

    Args:
        create_if_missing: Create the database instead of failing
        directory: Ingest directory to show in the suggested command

    Raises:
        click.Abort: If the database is missing and was not (or could not be) created
    """
    if database_exists():
        return True

    if not create_if_missing:
        abort(
            "Error: Database does not exist!",
            "\nPlease create the database first using:",
            f"  enemgenius-ingest {directory or '<directory>'} --create-database",
        )

    click.echo("Database does not exist. Creating database...")
    try:
        create_database()
    except Exception as e:
        abort(
            f"Failed to create database: {e}",
            "\nPlease ensure RavenDB is running and accessible.",
        )
    click.echo("✓ Database created successfully!")
    return True


def format_knowledge_file(file: KnowledgeFile) -> str:
    """One listing line: selection marker, id and display name."""
    marker = "✓" if file.is_selected else " "
    return f"[{marker}] {file.id}  {file.name}"


def format_question(index: int, question: Question) -> str:
    """Render a question with lettered options, marking the answer with *."""
    lines = [f"{index}. [{question.discipline} | {question.difficulty}] {question.stem}"]
    for i, option in enumerate(question.options or []):
        marker = "*" if i == question.answer_index else " "
        lines.append(f"  {marker} {chr(ord('A') + i)}) {option}")
    if question.expected_answer:
        lines.append(f"   Resposta esperada: {question.expected_answer}")
    lines.append("")
    return "\n".join(lines)


def get_database_info() -> tuple[str, str, dict[str, int] | None]:
    """Get the database location and its document count per collection.

    Counts are None when the database cannot be read.
    """
    url, db_name = RavenDBConfig.resolve()
    try:
        counts = collection_counts(url=url, database=db_name)
    except Exception:
        counts = None
    return url, db_name, counts
