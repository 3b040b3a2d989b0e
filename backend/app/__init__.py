"""Top-level application package for the receipt points API.

This package contains everything required to run the FastAPI backend of
a receipt points service: Pydantic schemas for receipts, the in-memory
receipt store, the points engine and the API routers.

To run the API locally you can execute:

```bash
uvicorn app.api.main:app --reload
```

or simply ``python -m app``, which serves the application on
http://localhost:8080 unless ``HOST``/``PORT`` say otherwise. Configuration values can be
overridden using environment variables or a ``.env`` file at the
project root.
"""

__all__: list[str] = []  # explicit for linters
