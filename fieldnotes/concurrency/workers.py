"""Worker pools, bounded concurrency and a cancellable background worker group."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from fieldnotes.concurrency.pipelines import Channel


@dataclass(frozen=True)
class Job:
    """A unit of work."""

    id: int
    payload: str = ""


@dataclass(frozen=True)
class Result:
    """The outcome of processing one job."""

    job_id: int
    output: str
    error: Exception | None = None


def _start(target, *args) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)
    thread.start()
    return thread


def process_jobs(
    jobs: Iterable[Job],
    worker_count: int = 3,
    work_delay: float = 0.1,
    timeout: float = 2.0,
) -> list[Result]:
    """Process jobs on a pool of workers, stopping when timeout seconds pass.

    Results come back in the order the workers finish them.
    """
    if worker_count < 1:
        raise ValueError("worker_count must be at least 1")

    stop = threading.Event()
    deadline = threading.Timer(timeout, stop.set)
    deadline.daemon = True
    deadline.start()

    jobs_ch = Channel()
    results_ch = Channel()

    def dispatch() -> None:
        try:
            for job in jobs:
                if not jobs_ch.send(job, stop):
                    return
        finally:
            jobs_ch.close()

    def work(worker_id: int) -> None:
        for job in jobs_ch:
            if stop.is_set():
                return
            time.sleep(work_delay)
            result = Result(job.id, f"worker-{worker_id} processed job-{job.id}")
            if not results_ch.send(result, stop):
                return

    workers = [_start(work, worker_id) for worker_id in range(1, worker_count + 1)]
    _start(dispatch)

    def close_results() -> None:
        for thread in workers:
            thread.join()
        results_ch.close()

    _start(close_results)
    try:
        return list(results_ch)
    finally:
        deadline.cancel()


def run_bounded(tasks: Iterable[Callable[[], Any]], limit: int = 3) -> list[Any]:
    """Run tasks with at most limit running at once; return results in task order."""
    if limit < 1:
        raise ValueError("limit must be at least 1")
    with ThreadPoolExecutor(max_workers=limit) as pool:
        return list(pool.map(lambda task: task(), tasks))


def run_background_workers(
    total: int = 10,
    worker_count: int = 3,
    stop: threading.Event | None = None,
    work_delay: float = 0.2,
    logger: logging.Logger | None = None,
) -> list[int]:
    """Dispatch total jobs to background workers until done or stop is set.

    Returns the ids of the jobs that completed, in completion order.
    """
    log = logger or logging.getLogger(__name__)
    stop = stop or threading.Event()
    job_ch = Channel(total)
    done: list[int] = []
    done_lock = threading.Lock()

    def process(worker_id: int, job: Job) -> None:
        log.info(
            "processing job worker_id=%d job_id=%d payload=%s", worker_id, job.id, job.payload
        )
        if stop.wait(work_delay):
            log.warning("job interrupted by cancellation job_id=%d", job.id)
            return
        log.info("job done worker_id=%d job_id=%d", worker_id, job.id)
        with done_lock:
            done.append(job.id)

    def work(worker_id: int) -> None:
        for job in job_ch:
            if stop.is_set():
                log.info("worker shutting down worker_id=%d", worker_id)
                return
            process(worker_id, job)
        log.info("job channel closed worker_id=%d", worker_id)

    def dispatch() -> None:
        try:
            for job_id in range(1, total + 1):
                if not job_ch.send(Job(job_id, f"task-{job_id}"), stop):
                    log.warning("dispatcher cancelled, sent only partial jobs sent=%d", job_id - 1)
                    return
            log.info("dispatcher finished sending all jobs total=%d", total)
        finally:
            job_ch.close()

    workers = [_start(work, worker_id) for worker_id in range(1, worker_count + 1)]
    _start(dispatch)
    for thread in workers:
        thread.join()
    log.info("all workers exited cleanly")
    return done


def _bounded_task(job_id: int, delay: float) -> Callable[[], int]:
    def task() -> int:
        print("starting job", job_id)
        time.sleep(delay)
        print("finished job", job_id)
        return job_id

    return task


def main(argv: Sequence[str] | None = None) -> int:
    """Run one of the worker demos: pool, bounded or background."""
    parser = argparse.ArgumentParser(prog="workers")
    parser.add_argument("demo", nargs="?", choices=("pool", "bounded", "background"), default="pool")
    parser.add_argument("--delay", type=float, default=None)
    args = parser.parse_args(argv)

    if args.demo == "pool":
        delay = 0.1 if args.delay is None else args.delay
        for result in process_jobs([Job(i) for i in range(1, 9)], 3, delay, 2.0):
            print(result.output)
        return 0

    if args.demo == "bounded":
        delay = 0.3 if args.delay is None else args.delay
        run_bounded([_bounded_task(i, delay) for i in range(1, 11)], 3)
        return 0

    delay = 0.2 if args.delay is None else args.delay
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    logger = logging.getLogger("fieldnotes.concurrency.workers")
    stop = threading.Event()

    def on_signal(*_: Any) -> None:
        logger.info("shutdown signal received")
        stop.set()

    handled = (signal.SIGINT, signal.SIGTERM)
    previous = {sig: signal.signal(sig, on_signal) for sig in handled}
    try:
        run_background_workers(10, 3, stop, delay, logger)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0