"""Mirror run coordination."""

import logging
import os
import shutil
import time
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .models import RunStats
from .path_cursor import PathCursor
from .walker import MirrorWalker
from ..config.config_manager import ConfigManager
from ..utils.formatters import format_date, format_stats_lines, format_summary

PACKAGE_LOGGER = "tree_mirror"
RUN_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class MirrorRunner:
    """Main mirror run coordinator."""
    
    def __init__(self, config_path: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        """Initialize mirror runner.
        
        Args:
            config_path: Optional path to configuration file.
            overrides: Values that replace keys of the ``mirror`` config section.
        """
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.load_config()
        self.logger = logging.getLogger(__name__)
        
        mirror_config = self.config_manager.get_mirror_config()
        for key, value in (overrides or {}).items():
            if value is not None:
                mirror_config[key] = value
        self.config_manager.validator.validate(self.config)
        
        self.walker = MirrorWalker(
            threshold_seconds=mirror_config['threshold_seconds'],
            chunk_size=mirror_config['chunk_size_kb'] * 1024,
            workers=mirror_config['workers']
        )
    
    def resolve_paths(self, source: Optional[str] = None,
                      destination: Optional[str] = None) -> Tuple[Optional[str], Optional[str]]:
        """Work out the source and destination folders of the run.
        
        Explicit arguments win, then the config file, then the legacy
        default paths file. Either element may still be None.
        """
        paths_config = self.config_manager.get_paths_config()
        source = source or paths_config.get('source')
        destination = destination or paths_config.get('destination')
        
        if not source or not destination:
            defaults = self.config_manager.load_default_paths()
            if defaults:
                self.logger.info(f"Using default paths from {paths_config.get('default_paths_file')}")
                source = source or defaults[0]
                destination = destination or defaults[1]
        
        return source, destination
    
    def run(self, source: Optional[str] = None, destination: Optional[str] = None) -> Dict[str, Any]:
        """Run a complete mirror from ``source`` into ``destination``.
        
        Args:
            source: Folder to back up.
            destination: Backup root; the copy lands in a subfolder named after ``source``.
            
        Returns:
            Dictionary with the run's stats, paths, timing, disk space and log file.
            
        Raises:
            ValueError: If a path is missing or unusable.
            FileNotFoundError: If a folder does not exist.
            OSError: If the run log cannot be created.
        """
        source, destination = self.resolve_paths(source, destination)
        source_cursor, destination_cursor = self._make_cursors(source, destination)
        target = destination_cursor.derive_from_source(source_cursor)
        
        log_file, handler = self._open_run_log()
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        previous_level = package_logger.level
        if package_logger.getEffectiveLevel() > logging.INFO:
            package_logger.setLevel(logging.INFO)
        package_logger.addHandler(handler)
        
        try:
            started = datetime.now()
            self.logger.info(f"[BACKUP START] Backup started on {format_date(started)}")
            self.logger.info(f"Source: {source_cursor}")
            self.logger.info(f"Destination: {target}")
            
            timer_start = time.perf_counter()
            stats = self.walker.mirror(source_cursor, destination_cursor, RunStats())
            elapsed_seconds = time.perf_counter() - timer_start
            
            self.logger.info("[STATS] " + "; ".join(format_stats_lines(stats)))
            finished = datetime.now()
            self.logger.info(f"[END] Backup ended on {format_date(finished)}")
            
            disk = self._disk_space(target.pop_full_level().text)
            self.logger.info("[BACKUP_END] " + format_summary(stats, elapsed_seconds, disk, indent="\t\t"))
        finally:
            package_logger.removeHandler(handler)
            package_logger.setLevel(previous_level)
            handler.close()
        
        return {
            'stats': stats,
            'source': source_cursor.text,
            'destination': target.text,
            'log_file': log_file,
            'started': started,
            'finished': finished,
            'elapsed_seconds': elapsed_seconds,
            'disk': disk
        }
    
    def _make_cursors(self, source: Optional[str], destination: Optional[str]) -> Tuple[PathCursor, PathCursor]:
        """Validate both folders and build the root cursors."""
        if not source:
            raise ValueError("Invalid source folder. Backup not started.")
        if not destination:
            raise ValueError("Invalid destination folder. Backup not started.")
        
        for label, path in (('Source', source), ('Destination', destination)):
            if not os.path.exists(path):
                raise FileNotFoundError(f"{label} folder does not exist: {path}")
            if not os.path.isdir(path):
                raise ValueError(f"{label} path is not a directory: {path}")
        
        mirror_config = self.config_manager.get_mirror_config()
        max_length = mirror_config['max_path_length']
        overflow = mirror_config['path_overflow']
        return (PathCursor.from_path(os.path.abspath(source), max_length, overflow),
                PathCursor.from_path(os.path.abspath(destination), max_length, overflow))
    
    def _open_run_log(self) -> Tuple[str, logging.Handler]:
        """Create a new log file for this run.
        
        Returns:
            Path of the log file and a handler writing to it.
        """
        log_dir = self.config_manager.get_logging_config()['log_dir']
        os.makedirs(log_dir, exist_ok=True)
        
        now = datetime.now()
        stem = (f"log_{now.month}-{now.day}-{now.year}_"
                f"{now.hour}-{now.minute}-{now.second}")
        log_file = os.path.join(log_dir, f"{stem}.txt")
        attempt = 1
        while True:
            try:
                handler = logging.FileHandler(log_file, mode='x', encoding='utf-8')
                break
            except FileExistsError:
                log_file = os.path.join(log_dir, f"{stem}_{attempt}.txt")
                attempt += 1
        
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(RUN_LOG_FORMAT))
        return log_file, handler
    
    def _disk_space(self, path: str) -> Optional[Dict[str, int]]:
        """Free and total bytes of the volume holding ``path``."""
        try:
            usage = shutil.disk_usage(path)
        except OSError as e:
            self.logger.warning(f"Could not query disk space for {path}: {e}")
            return None
        return {'free': usage.free, 'total': usage.total}
