import pytest

from db.sqlite_client import create_shared_database
from main import create_app
from models import ParsedTable


class FakeGenerator:
    """Stands in for the LLM: records prompts, returns a canned answer."""

    def __init__(self, response="SELECT 1"):
        self.response = response
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def shared_db():
    conn = create_shared_database()
    yield conn
    conn.close()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def app(shared_db, generator):
    app = create_app(shared_db=shared_db, generator=generator, audit_log_path=None)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def people_table():
    return ParsedTable(
        headers=("Name", "Age"),
        rows=({"Name": "Ann", "Age": "30"}, {"Name": "Bob", "Age": "41"}),
    )
