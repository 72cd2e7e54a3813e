import sys
import os
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from generators.csharp_encoding_renderer import CSharpEncodingRenderer

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path

@pytest.fixture
def render():
    """Render an EncodingBlock to C# text."""
    renderer = CSharpEncodingRenderer("Demo")
    return lambda block: str(renderer.render_block(block))

@pytest.fixture(autouse=True)
def clear_sw_environment(monkeypatch):
    """SW_* variables from the developer's shell must not leak into CLI tests."""
    for name in ("SW_INPUT_FILE", "SW_OUTPUT_DIR", "SW_OUTPUT_NAME", "SW_VERBOSE"):
        monkeypatch.delenv(name, raising=False)
