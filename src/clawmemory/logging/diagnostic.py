import logging

LOG_FORMAT = "%(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


class DiagnosticLogger:
    def __init__(self, name: str = "clawmemory.diagnostic"):
        self._logger = logging.getLogger(name)

    def warn(self, msg: str):
        self._logger.warning(f"[DIAG_WARN] {msg}")

    def debug(self, msg: str):
        self._logger.debug(f"[DIAG_DEBUG] {msg}")

    def error(self, msg: str):
        self._logger.error(f"[DIAG_ERROR] {msg}")

    def info(self, msg: str):
        self._logger.info(f"[DIAG_INFO] {msg}")

diagnostic_logger = DiagnosticLogger()

def log_lock_waiting(path: str, ahead: int):
    diagnostic_logger.debug(f"Path lock busy: {path}. Ahead: {ahead}")

def log_lock_acquired(path: str, waited_ms: float):
    diagnostic_logger.debug(f"Path lock acquired: {path}. Waited {int(waited_ms)}ms")

def log_command(command: str, target: str):
    diagnostic_logger.debug(f"memory {command} {target}")

def log_command_failed(command: str, kind: str, reason: str):
    diagnostic_logger.warn(f"memory {command} failed: kind={kind} error=\"{reason}\"")
