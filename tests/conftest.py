"""
Aleph Code - Test Configuration

Shared fixtures for the analysis core and the HTTP API.
"""
import pytest

from alephcode.analysis import AnalysisPipeline
from alephcode.factory import create_app
from alephcode.gematria import WordComputer
from alephcode.primes import PrimeOracle


@pytest.fixture
def oracle() -> PrimeOracle:
    """Fresh prime oracle with a small starting sieve."""
    return PrimeOracle()


@pytest.fixture
def computer(oracle) -> WordComputer:
    return WordComputer(oracle)


@pytest.fixture
def pipeline(oracle, computer) -> AnalysisPipeline:
    return AnalysisPipeline(oracle, computer)


@pytest.fixture
def sample_hebrew_text() -> str:
    """Genesis 1:1 with niqqud, plus a second line."""
    return "בְּרֵאשִׁית בָּרָא אֱלֹהִים אֵת הַשָּׁמַיִם וְאֵת הָאָרֶץ\nאור אדם דם"


@pytest.fixture(scope="session")
def app():
    app = create_app({"TESTING": True, "USE_WORKER_PROCESS": False, "LOG_LEVEL": "WARNING"})
    yield app
    app.extensions["alephcode.worker"].shutdown()


@pytest.fixture
def client(app):
    return app.test_client()
