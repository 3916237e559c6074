from typing import Optional, TextIO


class DebugLog:
    """Verbosity-levelled trace written to a file.

    Nothing is opened when `level` is 0. Level 1 traces pipeline phases,
    level 2 function declarations and calls, level 3 loop iterations and
    branch decisions.
    """
    def __init__(self, level: int = 0, path: str = 'debug.txt'):
        self.level = level
        self.path = path
        self.fp: Optional[TextIO] = open(path, 'w', encoding='utf-8') if level > 0 else None

    def enabled(self, level: int) -> bool:
        return self.fp is not None and self.level >= level

    def write(self, msg: str):
        if self.fp:
            self.fp.write(msg + '\n')
            self.fp.flush()

    def close(self):
        if self.fp:
            self.fp.close()
            self.fp = None
