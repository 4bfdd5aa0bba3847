"""Test configuration — ensure big3 modules are importable."""
import sys
from pathlib import Path

# Add project root to path so `from big3.xxx import` works without an install
sys.path.insert(0, str(Path(__file__).parent.parent))
