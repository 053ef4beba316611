import logging
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .compiler import TankCompiler, compile_sources, output_path

logger = logging.getLogger(__name__)


def trigger_recompile(sources, compiler):
    """Rebuilds every watched template from scratch. Returns the number of failures."""
    # Stale outputs would be inlined by includes, drop them all first.
    for src in sources:
        dst = output_path(src)
        if dst.exists():
            dst.unlink()

    return compile_sources(sources, compiler, clean=True)


class ChangeHandler(FileSystemEventHandler):
    def __init__(self, sources, compiler=None):
        self.sources = sorted(p.resolve() for p in sources)
        self.compiler = compiler or TankCompiler()
        logger.info("Handler initialized. Monitoring for changes...")

    def on_modified(self, event):
        if event.is_directory:
            return

        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs in self.sources:
            logger.info("Detected modification in: %s", src_path_abs)
            trigger_recompile(self.sources, self.compiler)


def run_watcher(sources, compiler=None):
    """Sets up and runs the watchdog observer."""
    sources = set(sources)
    dirs_to_watch = {p.resolve().parent for p in sources}

    if not dirs_to_watch:
        logger.error("No templates provided to watch.")
        return

    event_handler = ChangeHandler(sources, compiler)
    trigger_recompile(event_handler.sources, event_handler.compiler)

    observer = Observer()
    scheduled_count = 0
    for dir_path in dirs_to_watch:
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist. Cannot watch.", dir_path)
            continue

        # recursive=False: templates are compiled per directory, not per tree
        observer.schedule(event_handler, str(dir_path), recursive=False)
        scheduled_count += 1
        logger.info("Scheduled watcher for directory: %s", dir_path)

    if scheduled_count == 0:
        logger.error("No watchers were successfully scheduled. Exiting.")
        return

    observer.start()
    logger.info("Watching for file changes in %d director%s. Press Ctrl+C to stop.",
                scheduled_count, 'y' if scheduled_count == 1 else 'ies')

    try:
        while observer.is_alive():
            observer.join(timeout=1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher (Ctrl+C pressed)...")
    finally:
        if observer.is_alive():
            observer.stop()
        observer.join()
        logger.info("Watcher stopped completely.")
