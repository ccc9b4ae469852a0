"""
Instrumented Round-Trip Runner

For each swept size N: synthesize -> serialize (size) -> insert ->
read back (timed) -> optional retrieval-time update / delete -> emit.

Two reporting modes:
  per-document: one line per inserted document
  aggregate:    repetitions_per_size documents into a size-specific
                collection, then one timed bulk read-back, reported as
                average size plus mean read latency

Every HarnessError is fatal: the sweep stops, no line is emitted for the
failing size, and run() returns a failed RunResult carrying the rows
already emitted.
"""
import logging
import random
import time
from datetime import datetime
from typing import Callable, List, Optional

from arraybench.codec import document_size
from arraybench.config import HarnessConfig, ReportingMode
from arraybench.documents import INSERTION_TIME_FORMAT, IdFactory, TestDocument, synthesize
from arraybench.errors import HarnessError, StorageReadError, error_result, log_error
from arraybench.logging_config import log_run, log_size
from arraybench.naming import TimestampNamer
from arraybench.report import ResultRow, RunResult, csv_header, format_row
from arraybench.stats import TimingStats
from arraybench.storage import DocumentCollection, DocumentStore
from arraybench.sweep import generate_sweep

logger = logging.getLogger(__name__)


class RoundTripRunner:
    """Runs one sweep against a document store."""

    def __init__(
        self,
        config: HarnessConfig,
        store: DocumentStore,
        namer: Optional[Callable[[Optional[int]], str]] = None,
        rng: Optional[random.Random] = None,
        id_factory: Optional[IdFactory] = None,
        emit: Optional[Callable[[str], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
        timer: Callable[[], float] = time.perf_counter,
    ):
        """
        Args:
            config: HarnessConfig instance (validated here)
            store: Connected DocumentStore
            namer: Collection naming strategy; timestamped names by default
            rng: Random source for document content; seeded from
                config.random_seed when omitted
            id_factory: Identifier factory for nested ``ids``
            emit: Receives the header and each result line (print by default)
            clock: Wall clock for insertionTime
            timer: Monotonic timer for latency measurement
        """
        self.config = config.validate()
        self.store = store
        self.namer = namer or TimestampNamer(config.collection_prefix)
        self.rng = rng or random.Random(config.random_seed)
        self.id_factory = id_factory
        self.emit = emit or print
        self.clock = clock
        self.timer = timer

    @property
    def mode(self) -> ReportingMode:
        return self.config.reporting_mode

    def run(self) -> RunResult:
        """Execute the sweep with timing and error handling."""
        sizes = generate_sweep(self.config.ceiling, tuple(self.config.seed_pair))
        result = RunResult(
            run_id=self.config.run_id,
            mode=self.mode.value,
            status="running",
            started_at=datetime.now().isoformat(),
            sizes_total=len(sizes),
            config=self.config.to_dict(),
        )
        log_run(logger, "start", result.run_id, mode=result.mode, sizes=len(sizes),
                backend=self.store.backend_name)

        start = time.time()
        self.emit(csv_header(self.mode))

        run_collection = None
        if not self.config.collection_per_size:
            run_collection = self.store.collection(self.namer(None))

        current = None
        try:
            for n in sizes:
                current = n
                collection = run_collection
                if collection is None:
                    collection = self.store.collection(self.namer(n))
                log_size(logger, n, "start", collection=collection.name)

                if self.mode == ReportingMode.AGGREGATE:
                    rows = [self._run_aggregate(n, collection)]
                else:
                    rows = self._run_per_document(n, collection)

                for row in rows:
                    result.rows.append(row)
                    self.emit(format_row(row, self.mode))
                result.sizes_completed += 1
                log_size(logger, n, "end", size=rows[-1].size_in_bytes,
                         retrieval_ms=f"{rows[-1].retrieval_time_ms:.3f}")
            result.status = "completed"
        except HarnessError as e:
            result.status = "failed"
            result.error = error_result(e, object_count=current)
            log_error(logger, e, context=f"N={current}", include_traceback=False)

        result.duration_seconds = time.time() - start
        result.completed_at = datetime.now().isoformat()
        log_run(logger, "end", result.run_id, status=result.status,
                completed=f"{result.sizes_completed}/{result.sizes_total}")
        return result

    # -----------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------

    def _prepare(self, n: int) -> TestDocument:
        """Synthesize, measure size and stamp the insertion time."""
        started = self.clock()
        doc = synthesize(n, self.rng, self.id_factory)
        doc.size_in_bytes = document_size(doc)
        doc.insertion_time = started.strftime(INSERTION_TIME_FORMAT)
        return doc

    def _insert(self, doc: TestDocument, collection: DocumentCollection) -> TestDocument:
        doc.id = collection.insert(doc.to_document())
        return doc

    def _run_per_document(self, n: int, collection: DocumentCollection) -> List[ResultRow]:
        rows = []
        for _ in range(self.config.repetitions_per_size):
            doc = self._insert(self._prepare(n), collection)

            if self.config.read_back:
                doc.retrieval_time = self._read_back(doc, collection)
                if self.config.persist_retrieval_time:
                    collection.update(
                        {"_id": doc.id},
                        {"$set": {"retrievalTime": doc.retrieval_time}},
                    )
            if self.config.delete_after_read:
                collection.delete({"_id": doc.id})

            rows.append(ResultRow(
                object_count=n,
                size_in_bytes=doc.size_in_bytes,
                insertion_time=doc.insertion_time,
                retrieval_time_ms=doc.retrieval_time,
            ))
        return rows

    def _read_back(self, doc: TestDocument, collection: DocumentCollection) -> float:
        """Time find_one by id. Returns elapsed milliseconds."""
        t0 = self.timer()
        found = collection.find_one({"_id": doc.id})
        elapsed_ms = (self.timer() - t0) * 1000
        if found is None:
            raise StorageReadError(
                "Failed to retrieve document",
                details=f"No document with _id={doc.id} after insert",
                operation="find_one",
                collection=collection.name,
            )
        return elapsed_ms

    def _run_aggregate(self, n: int, collection: DocumentCollection) -> ResultRow:
        repetitions = self.config.repetitions_per_size
        total_size = 0
        inserted_ids = []
        for _ in range(repetitions):
            doc = self._insert(self._prepare(n), collection)
            total_size += doc.size_in_bytes
            inserted_ids.append(doc.id)

        # A repeated size (seed 0, 1 yields N=1 twice) can land in a
        # collection that already holds an earlier pass
        pass_filter = {"_id": {"$in": inserted_ids}}

        stats = TimingStats()
        if self.config.read_back:
            for _ in range(self.config.read_iterations):
                t0 = self.timer()
                docs = collection.find(pass_filter)
                stats.add((self.timer() - t0) * 1000)
                if len(docs) != repetitions:
                    raise StorageReadError(
                        "Failed to retrieve documents",
                        details=f"Expected {repetitions} documents, got {len(docs)}",
                        operation="find",
                        collection=collection.name,
                    )

        if self.config.delete_after_read:
            self.store.drop_collection(collection.name)

        return ResultRow(
            object_count=n,
            size_in_bytes=total_size / repetitions,
            retrieval_time_ms=stats.mean,
            documents=repetitions,
            retrieval_stats=stats.to_dict() if stats.count else None,
        )
