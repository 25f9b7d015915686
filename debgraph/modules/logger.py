# debgraph/modules/logger.py
import os
import sys
import datetime
import threading
import json

from rich.console import Console
from rich.markup import escape


class Logger:
    LEVELS = {
        "debug": 10,
        "info": 20,
        "success": 25,
        "warning": 30,
        "error": 40,
    }

    LOG_STYLES = {
        "DEBUG": "bright_black",
        "INFO": "blue",
        "SUCCESS": "green",
        "WARNING": "yellow",
        "ERROR": "bold red",
    }

    def __init__(self, name="debgraph", config=None, console=None):
        self.name = name
        get = config.get if config is not None else (lambda s, o, fallback=None: fallback)
        getbool = config.getboolean if config is not None else (lambda s, o, fallback=False: fallback)
        getint = config.getint if config is not None else (lambda s, o, fallback=0: fallback)

        self.log_file = os.path.expanduser(
            get("logging", "log_file", fallback="~/.cache/debgraph/debgraph.log"))
        self.color_output = getbool("logging", "color_output", fallback=True)
        self.log_to_file = getbool("logging", "log_to_file", fallback=False)
        self.log_to_console = getbool("logging", "log_to_console", fallback=True)
        self.use_utc = getbool("logging", "timestamp_utc", fallback=False)
        self.log_format = get("logging", "log_format", fallback="text").lower()
        self.max_log_size_kb = getint("logging", "max_log_size_kb", fallback=0)

        level_str = get("logging", "level", fallback="warning").lower()
        self.min_level = self.LEVELS.get(level_str, 30)

        # stdout carries the rendered graph
        self.console = console or Console(stderr=True, no_color=not self.color_output)

        if self.log_to_file:
            self._ensure_dir(self.log_file)

        self._lock = threading.Lock()

    def set_level(self, level):
        self.min_level = self.LEVELS.get(level.lower(), self.min_level)

    def _ensure_dir(self, filepath):
        dirpath = os.path.dirname(filepath)
        if not dirpath:
            return
        try:
            os.makedirs(dirpath, exist_ok=True)
        except OSError as e:
            print(f"Logger: could not create log directory {dirpath}: {e}", file=sys.stderr)

    def _get_timestamp(self):
        if self.use_utc:
            now = datetime.datetime.now(datetime.timezone.utc)
        else:
            now = datetime.datetime.now()
        return now.strftime("%Y-%m-%d %H:%M:%S")

    def _rotate_if_needed(self, filepath):
        if self.max_log_size_kb <= 0:
            return
        if os.path.exists(filepath) and os.path.getsize(filepath) > self.max_log_size_kb * 1024:
            rotated = filepath + ".1"
            try:
                os.replace(filepath, rotated)
            except OSError as e:
                print(f"Logger: could not rotate log {filepath}: {e}", file=sys.stderr)

    def _write_file(self, message):
        if not self.log_to_file:
            return
        self._rotate_if_needed(self.log_file)
        try:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(message + "\n")
        except OSError as e:
            print(f"Logger: could not write log file {self.log_file}: {e}", file=sys.stderr)

    def _format_text(self, level, message):
        timestamp = self._get_timestamp()
        return f"[{timestamp}] [{self.name}] [{level}] {message}"

    def _format_json(self, level, message):
        return json.dumps({
            "timestamp": self._get_timestamp(),
            "logger": self.name,
            "level": level,
            "message": message
        })

    def _format_message(self, level, message):
        if self.log_format == "json":
            return self._format_json(level, message)
        return self._format_text(level, message)

    def _log_to_console(self, formatted, level):
        if not self.log_to_console:
            return
        if self.color_output and self.log_format == "text":
            style = self.LOG_STYLES.get(level, "")
            self.console.print(escape(formatted), style=style, highlight=False, soft_wrap=True, overflow="ignore")
        else:
            self.console.print(formatted, markup=False, highlight=False, soft_wrap=True, overflow="ignore")

    def _should_log(self, level):
        return self.LEVELS.get(level.lower(), 0) >= self.min_level

    def log(self, level, message):
        level = level.upper()
        if not self._should_log(level):
            return

        formatted = self._format_message(level, message)
        with self._lock:
            self._log_to_console(formatted, level)
            self._write_file(formatted)

    def debug(self, message):
        self.log("DEBUG", message)

    def info(self, message):
        self.log("INFO", message)

    def success(self, message):
        self.log("SUCCESS", message)

    def warning(self, message):
        self.log("WARNING", message)

    def error(self, message):
        self.log("ERROR", message)
