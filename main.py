# main.py
import json
import logging
import sqlite3
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request

import config
from batch import run_batch
from db.materializer import ephemeral_database
from db.sqlite_client import create_shared_database, drop_all_tables, end_open_transaction
from errors import PlaygroundError
from llm_adapter import OpenAISQLGenerator, SQLGenerator, clean_sql_query, generate_sql
from models import DDL, OTHER, BatchResult, ExecutionResult, ParsedTable
from prompt_templates import describe_csv_schema
from schema_cache import SchemaCache
from sql_validator import CSV_POLICY, SHARED_POLICY

LOG = logging.getLogger(__name__)

api = Blueprint("api", __name__)


def create_app(shared_db: Optional[sqlite3.Connection] = None,
               generator: Optional[SQLGenerator] = None,
               audit_log_path: Optional[str] = config.AUDIT_LOG_PATH) -> Flask:
    """
    Build the playground app.

    shared_db:  long-lived connection every non-CSV request runs against
                (a freshly seeded in-memory database when omitted)
    generator:  callable prompt -> raw LLM text (OpenAI when omitted)
    audit_log_path: JSON-lines file for generation requests, None disables it
    """
    app = Flask(__name__)
    if shared_db is None:
        shared_db = create_shared_database()
    app.config["SHARED_DB"] = shared_db
    app.config["SCHEMA_CACHE"] = SchemaCache(shared_db)
    app.config["SQL_GENERATOR"] = generator or OpenAISQLGenerator()
    app.config["AUDIT_LOG_PATH"] = audit_log_path
    app.register_blueprint(api)
    return app


def _fail(msg: str, status: int):
    return jsonify({"success": False, "error": msg}), status


def _error_response(e: PlaygroundError):
    return _fail(str(e), e.status_code)


def _changes_schema(batch: BatchResult) -> bool:
    return any(isinstance(r, ExecutionResult) and r.kind in (DDL, OTHER) for r in batch.results)


def _audit(entry: dict) -> None:
    path = current_app.config.get("AUDIT_LOG_PATH")
    if not path:
        return
    try:
        with open(path, "a") as fh:
            fh.write(json.dumps(entry) + "\n")
    except OSError as e:
        LOG.warning("Could not write audit log %s: %s", path, e)


def _execute(require_csv: bool):
    body = request.get_json(silent=True) or {}
    query = body.get("query")
    if not isinstance(query, str) or not query.strip():
        return _fail("Missing query in request body", 400)
    csv_payload = body.get("csvData")
    if require_csv and csv_payload is None:
        return _fail("Missing csvData in request body", 400)

    cleaned = clean_sql_query(query)
    try:
        if csv_payload is None:
            shared_db = current_app.config["SHARED_DB"]
            try:
                batch = run_batch(shared_db, cleaned, SHARED_POLICY)
            finally:
                # transactions never outlive the request that opened them
                end_open_transaction(shared_db)
            if _changes_schema(batch):
                current_app.config["SCHEMA_CACHE"].clear()
        else:
            table = ParsedTable.from_payload(csv_payload)
            LOG.info("Executing against uploaded CSV %s (%d rows)", body.get("filename") or "(unnamed)", len(table.rows))
            with ephemeral_database(table) as conn:
                batch = run_batch(conn, cleaned, CSV_POLICY)
    except PlaygroundError as e:
        LOG.info("Query rejected (%s): %s", type(e).__name__, e)
        return _error_response(e)
    except Exception as e:
        LOG.exception("Error executing SQL query")
        return _fail(str(e) or "Error executing SQL query", 500)

    return jsonify(batch.to_dict(cleaned)), 200


def _generate(require_csv: bool):
    body = request.get_json(silent=True) or {}
    prompt = body.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        return _fail("Missing prompt in request body", 400)
    csv_payload = body.get("csvData")
    if require_csv and csv_payload is None:
        return _fail("Missing csvData in request body", 400)
    filename = body.get("filename")

    try:
        if csv_payload is None:
            table = None
            schema = current_app.config["SCHEMA_CACHE"].describe()
        else:
            table = ParsedTable.from_payload(csv_payload)
            schema = describe_csv_schema(table)
        sql = generate_sql(prompt, schema, current_app.config["SQL_GENERATOR"],
                           csv_table=table, filename=filename)
    except PlaygroundError as e:
        LOG.info("Generation failed: %s", e)
        return _error_response(e)
    except Exception as e:
        LOG.exception("Error in SQL generation")
        return _fail(str(e) or "Internal server error", 500)

    _audit({
        "prompt": prompt,
        "mode": "shared" if table is None else "csv",
        "filename": filename,
        "sql": sql,
    })
    return jsonify({"success": True, "query": sql}), 200


@api.route("/api/execute-sql", methods=["POST"])
def execute_sql():
    return _execute(require_csv=False)


@api.route("/api/execute-csv-sql", methods=["POST"])
def execute_csv_sql():
    return _execute(require_csv=True)


@api.route("/api/generate-sql", methods=["POST"])
def generate_sql_route():
    return _generate(require_csv=False)


@api.route("/api/generate-csv-sql", methods=["POST"])
def generate_csv_sql_route():
    return _generate(require_csv=True)


@api.route("/api/delete-all-tables", methods=["POST"])
def delete_all_tables():
    body = request.get_json(silent=True) or {}
    if body.get("confirmation") != config.DELETE_CONFIRMATION_TOKEN:
        return _fail(
            f"Confirmation required. Please provide '{config.DELETE_CONFIRMATION_TOKEN}' in the confirmation field.",
            400,
        )
    try:
        dropped = drop_all_tables(current_app.config["SHARED_DB"])
    except sqlite3.Error as e:
        LOG.exception("Error deleting tables")
        return _fail(str(e), 500)
    finally:
        current_app.config["SCHEMA_CACHE"].clear()
    return jsonify({
        "success": True,
        "message": f"All tables deleted successfully. {len(dropped)} tables dropped.",
        "tablesDropped": dropped,
    }), 200


@api.route("/health")
def health():
    return jsonify({"status": "healthy"}), 200


if __name__ == "__main__":
    # `flask --app main run` finds create_app() on its own
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    app = create_app()
    print("Registered routes:")
    for r in sorted([rule.rule for rule in app.url_map.iter_rules()]):
        print(" ", r)
    app.run(host=config.HOST, port=config.PORT)
