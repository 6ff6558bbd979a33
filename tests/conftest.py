"""Pytest bootstrap: point the application at the test configuration.

The configuration is loaded once when ``src.catalog.runtime.context`` is first
imported, so the environment has to be prepared before any fixture module
imports application code.
"""

import os
import tempfile
from pathlib import Path

os.environ.setdefault(
    "CATALOG_CONFIG", str(Path(__file__).parent / "config.test.yaml")
)
os.environ.setdefault("CATALOG_TEST_UPLOADS", tempfile.mkdtemp(prefix="catalog-uploads-"))

from tests.fixtures import *  # noqa: E402,F401,F403
