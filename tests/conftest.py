"""
Pytest configuration.

Adds the project root to the Python path so tests can import the domain,
services, api and scripts packages without an install.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
