# -*- coding: utf-8 -*-

"""
Monitor de rendimiento por fases (tiempo y memoria RSS).

    monitor = PerfMonitor()
    with monitor.phase("analisis", "Análisis del fichero de texto"):
        ...
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

import psutil

log = logging.getLogger("guionbd.monitor")


class PerfMonitor:
    def __init__(self) -> None:
        self.process = psutil.Process(os.getpid())
        self.phase_counter = 0
        self.timings: List[Tuple[str, float]] = []

    def get_mem_mb(self) -> float:
        return self.process.memory_info().rss / (1024 * 1024)

    @contextmanager
    def phase(self, name: str, description: Optional[str] = None) -> Iterator[None]:
        self.phase_counter += 1
        phase_id = self.phase_counter

        t0 = time.perf_counter()
        mem_before = self.get_mem_mb()
        log.debug("[PHASE_START] id=%d name=%s mem=%.2fMB", phase_id, name, mem_before)
        if description:
            log.info("--- FASE %d: %s ---", phase_id, description)

        try:
            yield
        finally:
            delta_t = time.perf_counter() - t0
            mem_after = self.get_mem_mb()
            self.timings.append((name, delta_t))
            log.debug(
                "[PHASE_END] id=%d name=%s time=%.3fs mem_before=%.2fMB mem_after=%.2fMB",
                phase_id, name, delta_t, mem_before, mem_after,
            )
            log.info("Tiempo: %.2f s | Memoria: %.2f MB → %.2f MB", delta_t, mem_before, mem_after)
