"""Command-line interface for ENEM Genius using Click."""

import asyncio
import os
from pathlib import Path

import click
from dotenv import load_dotenv

from enemgenius.client.cli_helpers import (
    abort,
    ensure_database_exists,
    format_knowledge_file,
    format_question,
    get_database_info,
)
from enemgenius.client.ingest import build_knowledge_file
from enemgenius.constants import (
    ALLOWED_EXTENSIONS,
    BLOOM_LEVELS,
    CONSTRUCTION_TYPES,
    DEFAULT_LOCAL_MCP_URL,
    DEFAULT_TEMPERATURE,
    DIFFICULTY_LEVELS,
    get_max_chunk_size,
    get_max_context_length,
)
from enemgenius.llm import get_llm_service
from enemgenius.service.database import KnowledgeStore, database_exists, delete_database
from enemgenius.service.mcp_helpers import call_mcp_tool
from enemgenius.service.question_generator import (
    GenerationRequest,
    QuestionGenerationError,
    RateLimitedError,
    generate_questions,
    retrieve_generation_context,
)

# Load environment variables
load_dotenv()


def find_documents(directory: Path) -> list[Path]:
    """List the supported documents of a directory, sorted by name."""
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lstrip(".").lower() in ALLOWED_EXTENSIONS
    )


@click.command()
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "--create-database",
    "create_database_flag",
    is_flag=True,
    default=False,
    help="Create the RavenDB database if it doesn't exist",
)
@click.option(
    "--select",
    "select_files",
    is_flag=True,
    default=False,
    help="Select the ingested files for retrieval",
)
@click.option(
    "--max-chunk-size",
    type=int,
    default=None,
    help="Maximum characters per chunk (default: from MAX_CHUNK_SIZE env or 1800)",
)
def ingest(
    directory: Path,
    create_database_flag: bool,
    select_files: bool,
    max_chunk_size: int | None,
) -> None:
    """Ingest PDF, DOCX, TXT and MD files from DIRECTORY into the knowledge base.

    Example:
        enemgenius-ingest materiais/
        enemgenius-ingest materiais/ --create-database --select
    """
    ensure_database_exists(create_if_missing=create_database_flag, directory=str(directory))

    documents = find_documents(directory)
    if not documents:
        click.echo(f"No supported documents found in '{directory}'")
        return

    chunk_size = max_chunk_size or get_max_chunk_size()
    click.echo(f"Found {len(documents)} document(s)")
    click.echo(f"Max chunk size: {chunk_size} characters\n")

    stored = 0
    with KnowledgeStore() as store:
        for path in documents:
            try:
                knowledge_file = build_knowledge_file(path, chunk_size, selected=select_files)
                store.save_file(knowledge_file)
                stored += 1
                click.echo(
                    f"  ✓ Indexed {len(knowledge_file.indexed_chunks)} chunks "
                    f"from {path.name} ({knowledge_file.id})"
                )
            except Exception as e:
                click.echo(f"  ✗ Error processing {path.name}: {e}", err=True)

    if not stored:
        abort("No documents were ingested.")
    click.echo(f"\n✓ Ingestion complete! Stored {stored} of {len(documents)} document(s).")


@click.command()
def files() -> None:
    """List the knowledge files; selected files are marked with ✓.

    Example:
        enemgenius-files
    """
    ensure_database_exists()
    with KnowledgeStore() as store:
        knowledge_files = store.get_all_files_meta()

    if not knowledge_files:
        click.echo("No knowledge files found.")
        return

    for knowledge_file in knowledge_files:
        click.echo(format_knowledge_file(knowledge_file))


@click.command()
@click.argument("file_id", type=str)
@click.option("--off", is_flag=True, default=False, help="Deselect the file instead")
def select(file_id: str, off: bool) -> None:
    """Select the knowledge file FILE_ID for retrieval.

    Example:
        enemgenius-select 3f2a...
        enemgenius-select 3f2a... --off
    """
    ensure_database_exists()
    with KnowledgeStore() as store:
        found = store.set_file_selected(file_id, not off)

    if not found:
        abort(f"Knowledge file not found: {file_id}")
    click.echo(f"✓ {'Deselected' if off else 'Selected'} {file_id}")


@click.command()
@click.argument("topics", type=str)
@click.option(
    "--max-length",
    type=int,
    default=None,
    help="Context budget in characters (default: from MAX_CONTEXT_LENGTH env or 12000)",
)
@click.option(
    "--via-mcp",
    is_flag=True,
    default=False,
    help="Ask the knowledge base MCP server instead of reading the database directly",
)
def context(topics: str, max_length: int | None, via_mcp: bool) -> None:
    """Show the context selected for TOPICS from the selected knowledge files.

    Example:
        enemgenius-context "revolução industrial"
        enemgenius-context "fotossíntese" --max-length 2000
    """
    budget = max_length or get_max_context_length()

    if via_mcp:
        server_url = os.getenv("LOCAL_MCP_SERVER_URL", DEFAULT_LOCAL_MCP_URL)
        try:
            result = asyncio.run(
                call_mcp_tool(
                    server_url,
                    "retrieve_context",
                    {"topics": topics, "max_context_length": budget},
                )
            )
        except Exception as e:
            abort(f"Error calling MCP server at {server_url}: {e}")
        selected = result.get("context", "")
    else:
        ensure_database_exists()
        with KnowledgeStore() as store:
            selected = retrieve_generation_context(store, GenerationRequest(topics=topics), budget)

    if not selected:
        click.echo("No context selected. Are any knowledge files selected?")
        return

    click.echo(f"📚 {len(selected)} characters of context:\n")
    click.echo(selected)


@click.command()
@click.option("--discipline", type=str, required=True, help="Discipline, e.g. 'História'")
@click.option("--topics", type=str, default="", help="Comma-separated topics")
@click.option("--num", "num_questions", type=int, default=3, help="Number of questions (1-10)")
@click.option(
    "--type",
    "question_type",
    type=click.Choice(["objective", "subjective"]),
    default="objective",
)
@click.option("--difficulty", type=click.Choice(DIFFICULTY_LEVELS), default="Médio")
@click.option("--bloom-level", type=click.Choice(BLOOM_LEVELS), default="Analisar")
@click.option(
    "--construction-type", type=click.Choice(CONSTRUCTION_TYPES), default="Interpretação"
)
@click.option("--school-year", type=str, default="3ª Série do Ensino Médio")
@click.option("--temperature", type=float, default=DEFAULT_TEMPERATURE)
@click.option("--save", is_flag=True, default=False, help="Store the generated questions")
def generate(
    discipline: str,
    topics: str,
    num_questions: int,
    question_type: str,
    difficulty: str,
    bloom_level: str,
    construction_type: str,
    school_year: str,
    temperature: float,
    save: bool,
) -> None:
    """Generate ENEM questions grounded on the selected knowledge files.

    Example:
        enemgenius-generate --discipline História --topics "revolução industrial"
        enemgenius-generate --discipline Biologia --num 5 --type subjective --save
    """
    request = GenerationRequest(
        num_questions=num_questions,
        question_type=question_type,
        discipline=discipline,
        school_year=school_year,
        difficulty=difficulty,
        bloom_level=bloom_level,
        construction_type=construction_type,
        topics=topics,
        temperature=temperature,
    )
    try:
        request.validate()
    except ValueError as e:
        abort(f"Error: {e}")

    ensure_database_exists()
    with KnowledgeStore() as store:
        selected = retrieve_generation_context(store, request, get_max_context_length())
        click.echo(f"📚 Using {len(selected)} characters of context")
        click.echo(f"🤖 Generating {num_questions} question(s)...\n")

        try:
            questions = asyncio.run(generate_questions(get_llm_service(), request, selected))
        except RateLimitedError as e:
            abort(f"Rate limited by the LLM service: {e}")
        except QuestionGenerationError as e:
            abort(f"Generation failed: {e}")

        for i, question in enumerate(questions, 1):
            click.echo(format_question(i, question))

        if save:
            store.save_questions(questions)
            click.echo(f"💾 Saved {len(questions)} question(s)")


@click.command()
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete_db(yes: bool) -> None:
    """Delete the RavenDB database and all its contents.

    WARNING: This is irreversible and deletes all knowledge files, questions and exams.

    Example:
        enemgenius-delete-db          # Will prompt for confirmation
        enemgenius-delete-db --yes    # Skip confirmation
    """
    url, db_name, counts = get_database_info()

    if not database_exists():
        click.echo(f"✓ Database '{db_name}' does not exist at {url}")
        return

    if not yes:
        click.echo(f"⚠️  WARNING: You are about to delete the database '{db_name}'")
        click.echo(f"   Location: {url}\n")
        click.echo("This will permanently delete:")
        click.echo("  • All knowledge files and their indexes")
        click.echo("  • All questions")
        click.echo("  • All exams\n")

        if counts is not None:
            summary = ", ".join(f"{count} {name}" for name, count in counts.items())
            click.echo(f"📊 Current database contains: {summary}\n")

        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    click.echo(f"🗑️  Deleting database '{db_name}'...")
    try:
        delete_database()
        click.echo(f"✓ Database '{db_name}' successfully deleted!")
        click.echo("\nTo create a new database, run:")
        click.echo("  enemgenius-ingest <directory> --create-database")
    except Exception as e:
        abort(f"Error deleting database: {e}")


if __name__ == "__main__":
    ingest()
