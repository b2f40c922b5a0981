import asyncio
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from time import perf_counter

from tqdm import tqdm

from wikidump.config.logger_config import logger
from wikidump.conversion.application.handoff import HandoffQueue
from wikidump.conversion.application.ports import LineSinkPort, RecordSourcePort
from wikidump.conversion.domain.models import ConvertSummary, RawRecord, TransformResult
from wikidump.conversion.domain.transformer import RecordTransformer

_SOURCE_EXHAUSTED = object()


@dataclass(frozen=True)
class ConvertWorkflowConfig:
    worker_count: int = 1
    queue_size: int | None = None
    executor: str = "process"
    show_progress: bool = False

    @property
    def effective_queue_size(self) -> int:
        return self.queue_size or 2 * self.worker_count


def build_executor(kind: str, worker_count: int) -> Executor:
    if kind == "process":
        return ProcessPoolExecutor(max_workers=worker_count)
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=worker_count, thread_name_prefix="wikidump-worker")
    raise ValueError(f"Unsupported executor: {kind}")


class ConvertDumpWorkflow:
    """Reads raw records, transforms them on N workers and writes one line per result.

    Stages are joined by two handoff queues. Shutdown runs strictly in
    order: source exhausted, input queue closed, all workers joined, output
    queue closed, writer drained.
    """

    def __init__(
        self,
        source: RecordSourcePort,
        transformer: RecordTransformer,
        sink: LineSinkPort,
        config: ConvertWorkflowConfig | None = None,
    ) -> None:
        self.source = source
        self.transformer = transformer
        self.sink = sink
        self.config = config or ConvertWorkflowConfig()
        self._reset_counters()

    async def run(self) -> ConvertSummary:
        started = perf_counter()
        self._reset_counters()
        worker_count = self.config.worker_count
        queue_size = self.config.effective_queue_size
        logger.info(
            "Dump conversion started: worker_count={}, executor={}, queue_size={}",
            worker_count,
            self.config.executor,
            queue_size,
        )

        input_queue: HandoffQueue[RawRecord] = HandoffQueue(maxsize=queue_size, consumers=worker_count)
        output_queue: HandoffQueue[str] = HandoffQueue(maxsize=queue_size, consumers=1)
        executor = build_executor(self.config.executor, worker_count)
        try:
            workers = [
                asyncio.create_task(self._work(input_queue, output_queue, executor), name=f"worker-{i}")
                for i in range(worker_count)
            ]
            writer = asyncio.create_task(self._write(output_queue), name="writer")
            driver = asyncio.create_task(self._drive(input_queue, output_queue, workers, writer), name="driver")
            await self._supervise(driver, writer, workers)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        duration_ms = int((perf_counter() - started) * 1000)
        summary = ConvertSummary(
            records_read=self._records_read,
            written_count=self._written_count,
            filtered_count=self._counts["filtered"],
            redirect_count=self._counts["redirect"],
            empty_count=self._counts["empty"],
            decode_error_count=self._counts["decode_error"],
            encode_error_count=self._counts["encode_error"],
            worker_count=worker_count,
            duration_ms=duration_ms,
            generated_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            "Dump conversion completed: duration_ms={}, records_read={}, written_count={}, filtered_count={}, redirect_count={}, empty_count={}, decode_error_count={}, encode_error_count={}",
            summary.duration_ms,
            summary.records_read,
            summary.written_count,
            summary.filtered_count,
            summary.redirect_count,
            summary.empty_count,
            summary.decode_error_count,
            summary.encode_error_count,
        )
        return summary

    async def _drive(
        self,
        input_queue: HandoffQueue[RawRecord],
        output_queue: HandoffQueue[str],
        workers: list[asyncio.Task],
        writer: asyncio.Task,
    ) -> None:
        await self._read_source(input_queue)
        await input_queue.close()
        await asyncio.gather(*workers)
        # Only reachable once every worker has returned, nothing can put after this.
        await output_queue.close()
        await writer

    async def _supervise(self, driver: asyncio.Task, writer: asyncio.Task, workers: list[asyncio.Task]) -> None:
        tasks = [driver, writer, *workers]
        try:
            await asyncio.wait({driver, writer}, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await self._cancel_all(tasks)
            raise

        # Writer first: a sink failure also surfaces in the driver awaiting it.
        for task in (writer, driver):
            if task.done() and not task.cancelled() and task.exception() is not None:
                error = task.exception()
                logger.error(
                    "Dump conversion aborted: stage={}, error_type={}, error={}",
                    task.get_name(),
                    type(error).__name__,
                    error,
                )
                await self._cancel_all(tasks)
                raise error

    @staticmethod
    async def _cancel_all(tasks: list[asyncio.Task]) -> None:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _read_source(self, input_queue: HandoffQueue[RawRecord]) -> None:
        with tqdm(
            total=None,
            desc="Dump records",
            unit=" record",
            leave=True,
            disable=not self.config.show_progress,
        ) as progress:
            # Parsing runs off the event loop so workers and the writer keep moving.
            records = iter(self.source.iter_records())
            while True:
                raw = await asyncio.to_thread(next, records, _SOURCE_EXHAUSTED)
                if raw is _SOURCE_EXHAUSTED:
                    break
                self._records_read += 1
                await input_queue.put(raw)
                progress.update(1)

    async def _work(
        self,
        input_queue: HandoffQueue[RawRecord],
        output_queue: HandoffQueue[str],
        executor: Executor,
    ) -> None:
        loop = asyncio.get_running_loop()
        async for raw in input_queue:
            result = await loop.run_in_executor(executor, self.transformer.transform, raw)
            self._record_outcome(result)
            if result.ok:
                await output_queue.put(result.line)

    async def _write(self, output_queue: HandoffQueue[str]) -> None:
        async for line in output_queue:
            self.sink.write_line(line)
            self._written_count += 1

    def _record_outcome(self, result: TransformResult) -> None:
        self._counts[result.status] += 1
        if result.status in ("decode_error", "encode_error"):
            logger.warning(
                "Record dropped: reason={}, title={}, error={}",
                result.status,
                result.title,
                result.error,
            )
        elif not result.ok:
            logger.debug("Record skipped: reason={}, title={}", result.status, result.title)

    def _reset_counters(self) -> None:
        self._records_read = 0
        self._written_count = 0
        self._counts = {k: 0 for k in ("ok", "filtered", "redirect", "empty", "decode_error", "encode_error")}
