from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ProcessPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from concurrent.futures.process import BrokenProcessPool
from typing import Any, Callable

from .analysis import AnalysisPipeline, AnalysisResult
from .gematria import WordComputer
from .letters import Mode
from .primes import PrimeOracle

logger = logging.getLogger(__name__)

Message = dict[str, Any]

# Pipeline owned by the background analysis process. Set by its initializer;
# the parent process always passes its pipeline explicitly.
_process_pipeline: AnalysisPipeline | None = None


def init_worker_process(sieve_cap: int, word_cache_size: int, letter_details_cache_size: int) -> None:
    """ProcessPoolExecutor initializer: size the worker's sieve and caches like the parent's."""
    global _process_pipeline
    oracle = PrimeOracle(cap=sieve_cap)
    computer = WordComputer(oracle, cache_size=word_cache_size, letter_details_cache_size=letter_details_cache_size)
    _process_pipeline = AnalysisPipeline(oracle, computer)


def _worker_pipeline() -> AnalysisPipeline:
    global _process_pipeline
    if _process_pipeline is None:
        _process_pipeline = AnalysisPipeline()
    return _process_pipeline


def handle_message(message: Message) -> Message:
    """
    Worker-side entry point: {requestId, text, mode} -> {requestId, results} | {requestId, error}.

    Runs in the worker process (or inline as the fallback). Any failure is
    reported back as an error message instead of propagating.
    """
    message = message or {}
    request_id = message.get("requestId")
    text = message.get("text")
    mode = message.get("mode")
    if not isinstance(text, str) or mode not in {m.value for m in Mode}:
        return {"requestId": request_id, "error": "Invalid analysis request"}

    try:
        return {"requestId": request_id, "results": _worker_pipeline().compute_core_results(text, mode)}
    except Exception as e:
        logger.exception(f"Analysis request {request_id} failed")
        return {"requestId": request_id, "error": str(e)}


class AnalysisWorker:
    """
    Runs analysis requests in a single background process.

    Only messages cross the process boundary. When the process pool cannot be
    started, breaks, or reports an error, the worker is marked crashed and
    every later request is computed inline on the calling thread.
    """

    def __init__(self, use_process: bool = True, pipeline: AnalysisPipeline | None = None):
        self.pipeline = pipeline or AnalysisPipeline()
        self.crashed = False
        self.closed = False
        self._executor: ProcessPoolExecutor | None = None
        if use_process:
            try:
                computer = self.pipeline.computer
                self._executor = ProcessPoolExecutor(
                    max_workers=1,
                    initializer=init_worker_process,
                    initargs=(self.pipeline.oracle.cap, computer.cache_limit, computer.letter_details_limit),
                )
            except (OSError, NotImplementedError) as e:
                logger.warning(f"Background analysis process unavailable, computing inline: {e}")

    @property
    def in_process(self) -> bool:
        return self._executor is None or self.crashed

    def _mark_crashed(self, reason: str) -> None:
        if not self.crashed:
            logger.error(f"Analysis worker failed: {reason}; falling back to inline computation")
        self.crashed = True

    def run_inline(self, message: Message) -> Message:
        try:
            results = self.pipeline.compute_core_results(message["text"], message["mode"])
        except (KeyError, TypeError, ValueError) as e:
            return {"requestId": message.get("requestId"), "error": f"Invalid analysis request: {e}"}
        return {"requestId": message.get("requestId"), "results": results}

    def post(self, message: Message) -> Future:
        """Send one request. The returned future resolves to the response message."""
        if self.closed:
            raise RuntimeError("Analysis worker is shut down")
        if not self.in_process:
            try:
                future = self._executor.submit(handle_message, message)
            except (BrokenProcessPool, RuntimeError) as e:
                self._mark_crashed(str(e))
            else:
                future.add_done_callback(self._watch)
                return future

        future = Future()
        future.set_result(self.run_inline(message))
        return future

    def _watch(self, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._mark_crashed(repr(error))
        elif "error" in future.result():
            self._mark_crashed(future.result()["error"])

    def request(self, message: Message, timeout: float | None = None) -> Message:
        """
        Send one request and wait for its response, recomputing inline when
        the background process fails it. A request still running after
        `timeout` seconds is answered with an error message.
        """
        remote = not self.in_process
        try:
            response = self.post(message).result(timeout=timeout)
        except BrokenProcessPool as e:
            self._mark_crashed(str(e))
            return self.run_inline(message)
        except FutureTimeoutError:
            logger.warning(f"Analysis request {message.get('requestId')} timed out after {timeout}s")
            return {"requestId": message.get("requestId"), "error": f"Analysis timed out after {timeout}s"}
        if remote and "error" in response:
            return self.run_inline(message)
        return response

    def shutdown(self) -> None:
        """Stop the background process. Posting afterwards raises RuntimeError."""
        self.closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None


def debounce_delay(text_length: int) -> float:
    """Seconds to wait after an edit: 200ms for short texts, growing to 1s."""
    return min(1000.0, max(200.0, text_length * 0.5)) / 1000.0


class Debouncer:
    """Trailing-edge debounce: each call replaces the pending one."""

    def __init__(self):
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: Callable[[], Any] | None = None

    def call(self, delay: float, fn: Callable[[], Any]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = fn
            self._timer = threading.Timer(delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            fn, self._pending, self._timer = self._pending, None, None
        if fn is not None:
            fn()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._pending = None

    def flush(self) -> None:
        """Run the pending call now, if there is one."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            fn, self._pending, self._timer = self._pending, None, None
        if fn is not None:
            fn()

    @property
    def pending(self) -> bool:
        return self._pending is not None


class AnalysisSession:
    """
    One interactive consumer of analysis results.

    Every accepted text or mode edit bumps the session version, and requests
    are sent tagged with the version of the input they analyze. A response is
    accepted only if its id is the current version, so a reply for replaced
    input is dropped even while the next request is still being debounced.
    """

    def __init__(
        self,
        worker: AnalysisWorker,
        mode: Mode | str = Mode.ALEPH_ZERO,
        on_results: Callable[[AnalysisResult | None], Any] | None = None,
        debounce: bool = True,
    ):
        self.worker = worker
        self.mode = Mode.parse(mode)
        self.text = ""
        self.results: AnalysisResult | None = None
        self.on_results = on_results
        self._version = 0
        self._lock = threading.Lock()
        self._debouncer = Debouncer() if debounce else None

    @property
    def version(self) -> int:
        return self._version

    def _supersede(self) -> None:
        # Caller holds the lock.
        self._version += 1
        self.results = None

    def set_text(self, text: str) -> None:
        with self._lock:
            if text == self.text:
                return
            self.text = text
            self._supersede()
        self._notify(None)
        self._schedule()

    def set_mode(self, mode: Mode | str) -> None:
        mode = Mode.parse(mode)
        with self._lock:
            if mode is self.mode:
                return
            self.mode = mode
            self._supersede()
        self._notify(None)
        self._schedule()

    def _schedule(self) -> None:
        if self._debouncer is None:
            self.request()
        else:
            self._debouncer.call(debounce_delay(len(self.text)), self.request)

    def flush(self) -> None:
        if self._debouncer is not None:
            self._debouncer.flush()

    def request(self) -> int:
        """Send the current text now. Returns the request id."""
        with self._lock:
            request_id, text, mode = self._version, self.text, self.mode
        if not text:
            return request_id

        future = self.worker.post({"requestId": request_id, "text": text, "mode": mode.value})
        future.add_done_callback(self._on_response)
        return request_id

    def _on_response(self, future: Future) -> None:
        if future.cancelled():
            return
        if future.exception() is not None:
            logger.error(f"Analysis response lost: {future.exception()!r}")
            return
        self.accept(future.result())

    def accept(self, response: Message) -> bool:
        """Apply a response message if it answers the current input."""
        request_id = response.get("requestId")
        with self._lock:
            if request_id != self._version:
                logger.debug(f"Discarding stale analysis response {request_id} (latest {self._version})")
                return False
            if "error" in response:
                logger.error(f"Analysis request {request_id} failed: {response['error']}")
                return False
            self.results = results = response["results"]
        self._notify(results)
        return True

    def _notify(self, results: AnalysisResult | None) -> None:
        if self.on_results is not None:
            self.on_results(results)

    def close(self) -> None:
        if self._debouncer is not None:
            self._debouncer.cancel()
