"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: Parsing a large particle CSV on the main thread would
   freeze the GUI. The loader runs in a background thread.
2. Signals: The parsed dataset (or the error) is handed back to the GUI
   thread through Qt Signals; only then does it reach the Store.

Classes:
    LoaderWorker: Reads a particle CSV file into a ParticleSet.
"""
import logging
import time

from PySide6.QtCore import QThread, Signal

from fluidbrush.model.io import load_particles

logger = logging.getLogger(__name__)


class LoaderWorker(QThread):
    # Signals to update the UI from the background
    progress_updated = Signal(str)
    finished_loading = Signal(object, str)  # (ParticleSet, filepath)
    error_occurred = Signal(str)

    def __init__(self, filepath: str) -> None:
        super().__init__()
        self.filepath = filepath

    def run(self) -> None:
        try:
            logger.info(f"Starting loader in background thread for {self.filepath}")
            self.progress_updated.emit(f"Loading {self.filepath}...")

            started = time.perf_counter()
            particles = load_particles(self.filepath)
            elapsed = time.perf_counter() - started
            logger.info(f"Parsed {len(particles)} particles in {elapsed:.2f} s.")

            self.finished_loading.emit(particles, self.filepath)

        except Exception as e:
            logger.error(f"Error in LoaderWorker: {e}")
            self.error_occurred.emit(str(e))
