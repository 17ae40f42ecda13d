# prompt_templates.py
# Prompt text sent to the LLM for natural language -> SQLite translation.
import textwrap
from typing import Optional

from config import CSV_PROMPT_SAMPLE_ROWS, CSV_TABLE_NAME
from models import ParsedTable

SYSTEM_INSTRUCTIONS = textwrap.dedent("""
You translate natural language requests into SQLite queries.
Respond with the SQL only: no explanation, no markdown, no backticks, no comments.
Use only the tables and columns listed in the schema.
""").strip()

GENERATION_PROMPT = textwrap.dedent("""
Convert the following request into a valid SQLite query.

The database has the following schema:
{schema}
{notes}
Request: {request}
""").strip()

CSV_NOTES = textwrap.dedent("""
The table {table} was loaded from the uploaded file {filename}.
Every column is stored as TEXT; CAST values when comparing or aggregating numbers.
Quote column names that contain spaces or punctuation with double quotes.
Sample rows:
{samples}
""")


def describe_csv_schema(table: ParsedTable, table_name: str = CSV_TABLE_NAME) -> str:
    cols = ", ".join(table.headers)
    return f"- {table_name} ({cols})"


def _csv_notes(table: ParsedTable, filename: Optional[str], table_name: str) -> str:
    samples = []
    for row in table.rows[:CSV_PROMPT_SAMPLE_ROWS]:
        samples.append("  " + ", ".join(f"{h}={row[h]!r}" for h in table.headers))
    return CSV_NOTES.format(
        table=table_name,
        filename=filename or "(unnamed)",
        samples="\n".join(samples) or "  (no rows)",
    )


def build_generation_prompt(request: str, schema: str,
                            csv_table: Optional[ParsedTable] = None,
                            filename: Optional[str] = None,
                            table_name: str = CSV_TABLE_NAME) -> str:
    """
    Full user prompt for one generation request. `schema` is the
    "- Table (col, ...)" listing of whatever database the SQL will run on.
    """
    notes = _csv_notes(csv_table, filename, table_name) if csv_table is not None else ""
    return GENERATION_PROMPT.format(schema=schema, notes=notes, request=request.strip())
