from __future__ import annotations

from flask import Flask, current_app
from flask_smorest import Api

from .analysis import AnalysisPipeline
from .gematria import WordComputer
from .primes import PrimeOracle
from .worker import AnalysisWorker

api = Api()

_EXTENSION_KEY = "alephcode.worker"


def init_worker(app: Flask) -> AnalysisWorker:
    """
    Create the app's analysis worker.

    The inline pipeline (used by the fallback path and by the per-word
    endpoints) gets its own prime oracle and word cache sized from config.
    """
    oracle = PrimeOracle(cap=app.config["SIEVE_CAP"])
    computer = WordComputer(
        oracle,
        cache_size=app.config["WORD_CACHE_SIZE"],
        letter_details_cache_size=app.config["LETTER_DETAILS_CACHE_SIZE"],
    )
    worker = AnalysisWorker(
        use_process=app.config["USE_WORKER_PROCESS"],
        pipeline=AnalysisPipeline(oracle, computer),
    )
    app.extensions[_EXTENSION_KEY] = worker
    return worker


def get_worker() -> AnalysisWorker:
    return current_app.extensions[_EXTENSION_KEY]
