import pathlib
import sys

import pytest

from engine import EngineConfig, StepController
from graph import Graph

# Add tests directory to sys.path so helpers.py can be imported
_tests_dir = pathlib.Path(__file__).parent
if str(_tests_dir) not in sys.path:
    sys.path.insert(0, str(_tests_dir))


@pytest.fixture
def graph() -> Graph:
    """Empty undirected, weighted graph."""
    return Graph(directed=False, weighted=True)


@pytest.fixture
def directed_graph() -> Graph:
    return Graph(directed=True, weighted=True)


@pytest.fixture
def controller(graph) -> StepController:
    return StepController(graph)


@pytest.fixture
def app():
    from main import create_app

    return create_app(EngineConfig())


@pytest.fixture
def client(app):
    return app.test_client()
