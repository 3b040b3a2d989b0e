"""Root pytest configuration (kept intentionally minimal).

The application package resides in the nested `app/` directory and the
shared fixtures live in `tests/conftest.py`. There must be no `__init__`
at the backend root, which would shadow the real package.
"""

# Intentionally no path mangling here.
