# errors.py
# Every user-facing failure carries the HTTP status the API answers with.


class PlaygroundError(Exception):
    status_code = 500


class MalformedInputError(PlaygroundError):
    """CSV text or csvData payload has the wrong shape."""
    status_code = 400


class EmptyQueryError(PlaygroundError):
    status_code = 400

    def __init__(self, msg: str = "No SQL statements found in query"):
        super().__init__(msg)


class PolicyViolation(PlaygroundError):
    """Statement matched a blocked destructive phrase."""
    status_code = 403


class MaterializationError(PlaygroundError):
    """Uploaded CSV could not be loaded into a table."""
    status_code = 500


class ExecutionError(PlaygroundError):
    """SQLite rejected a statement. The message is the engine's, verbatim."""
    status_code = 500


class GenerationError(PlaygroundError):
    status_code = 500

    def __init__(self, msg: str, status_code: int = None):
        super().__init__(msg)
        if status_code is not None:
            self.status_code = status_code
