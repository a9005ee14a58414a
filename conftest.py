"""Pytest configuration for the sum-check package."""

import sys
from pathlib import Path

# Add the repository root to the path so absolute imports work without install
repo_root = Path(__file__).parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))
