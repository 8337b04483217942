from .process_runner import ProcessRunner

__all__ = ["ProcessRunner"]
