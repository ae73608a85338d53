# reqtimer/utils/errors.py
class TimerNotFoundError(KeyError):
    """
    Raised by strict lookups when no timer is stored under a name.
    The legacy operations (stop / elapsed_time) never raise this.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"timer not found: {self.name!r}"


class ConfigError(RuntimeError):
    """
    Raised for invalid user-provided config (unknown clock, bad file).
    Should NOT print traceback.
    """
