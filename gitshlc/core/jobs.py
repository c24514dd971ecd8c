# -*- coding: utf-8 -*-
"""
GitSHLC Jobs Module
Runs orchestrations on worker threads and delivers results on the Qt
event loop. One run per key (repository path) at a time; the newest
waiting request replaces older ones.
"""

import threading

from gitshlc.core import log


def _get_qt_core():
    """
    Lazy import of QtCore so the library imports without a GUI stack

    Returns:
        QtCore module
    """
    try:
        from PySide6 import QtCore
    except ImportError:
        raise ImportError(
            "PySide6 is required for background jobs."
        )
    return QtCore


class _CallableWorkerSignals:
    """
    Helper object that emits signals to marshal callbacks to the UI thread.
    threading.Thread doesn't integrate with Qt's event loop on its own.
    """

    def __init__(self, qt_core):
        class _SignalEmitter(qt_core.QObject):
            success = qt_core.Signal(object, str)  # result, name
            error = qt_core.Signal(object, str)  # exception, name

        self._emitter = _SignalEmitter()
        # pending jobs are started from a finishing worker thread
        app = qt_core.QCoreApplication.instance()
        if app is not None:
            self._emitter.moveToThread(app.thread())

    def connect_success(self, callback):
        self._emitter.success.connect(
            lambda result, name: self._invoke(callback, result, name)
        )

    def connect_error(self, callback):
        self._emitter.error.connect(
            lambda error, name: self._invoke(callback, error, name)
        )

    def emit_success(self, result, name):
        self._emitter.success.emit(result, name)

    def emit_error(self, error, name):
        self._emitter.error.emit(error, name)

    def _invoke(self, callback, payload, name):
        """Called on UI thread"""
        try:
            callback(payload)
        except Exception as e:
            log.error_safe(f"Callback failed for {name}", e)


class ActionJobRunner:
    """
    Background runner for orchestration calls.

    Runs for different keys proceed in parallel. For one key, a submit while
    a run is active becomes the single pending job, replacing any earlier
    pending job (last request wins).
    """

    def __init__(self):
        self._qt_core = _get_qt_core()
        self._lock = threading.Lock()
        self._active = set()
        self._pending = {}

    def run_callable(self, name, func, on_success=None, on_error=None, on_done=None):
        """
        Run a Python callable in a worker thread.

        Args:
            name: str - Name for this job (for logging)
            func: callable() -> result - Runs on the worker thread
            on_success: callable(result) - Called on UI thread if func returns
            on_error: callable(exception) - Called on UI thread if func raises
            on_done: callable() - Called on the worker thread afterwards

        Returns:
            threading.Thread: The started worker
        """
        signals = _CallableWorkerSignals(self._qt_core)

        if on_success:
            signals.connect_success(on_success)
        if on_error:
            signals.connect_error(on_error)

        def _worker():
            try:
                log.debug(f"Job {name} starting")
                result = func()
                log.debug(f"Job {name} completed")
                if on_success:
                    signals.emit_success(result, name)
            except Exception as e:
                log.error_safe(f"Job {name} failed", e)
                if on_error:
                    signals.emit_error(e, name)
            finally:
                if on_done:
                    on_done()

        thread = threading.Thread(target=_worker, name=f"gitshlc-{name}", daemon=True)
        # keep the emitter alive as long as the worker
        thread.signals = signals
        thread.start()
        return thread

    def submit(self, key, name, func, on_success=None, on_error=None):
        """
        Queue a run for a key (usually the repository path).

        Args:
            key: Serialization key
            name: Job name for logging
            func: callable() -> result
            on_success: UI-thread callback with the result
            on_error: UI-thread callback with the exception

        Returns:
            bool: True if started now, False if left pending
        """
        job = (name, func, on_success, on_error)
        with self._lock:
            if key in self._active:
                replaced = self._pending.get(key)
                if replaced is not None:
                    log.debug(f"Replacing pending job {replaced[0]} with {name}")
                self._pending[key] = job
                return False
            self._active.add(key)

        self._start(key, job)
        return True

    def _start(self, key, job):
        name, func, on_success, on_error = job
        self.run_callable(
            name,
            func,
            on_success=on_success,
            on_error=on_error,
            on_done=lambda: self._finished(key),
        )

    def _finished(self, key):
        with self._lock:
            job = self._pending.pop(key, None)
            if job is None:
                self._active.discard(key)
                return
        self._start(key, job)

    def is_busy(self, key=None):
        """True if a run is active (for `key`, or for any key)."""
        with self._lock:
            if key is None:
                return bool(self._active)
            return key in self._active

