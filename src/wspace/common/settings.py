from pathlib import Path
import logging as lg
import tomllib


class Settings:
    TYPES = {
        'verbose': bool,
        'trace': bool,
        'dump': bool,
        'split_crlf': bool,
        'heap_default': int,
    }

    verbose: bool
    trace: bool
    dump: bool
    split_crlf: bool            # CR and LF of a CRLF pair are two terminators
    heap_default: int | None    # Value of a never-written heap cell, None is fatal

    def __init__(self):
        self.verbose = False
        self.trace = False
        self.dump = False
        self.split_crlf = False
        self.heap_default = None

    def update(
        self,
        verbose: bool | None = None,
        trace: bool | None = None,
        dump: bool | None = None,
        split_crlf: bool | None = None,
        heap_default: int | None = None
    ):
        if verbose is not None:
            self.verbose = verbose

        if trace is not None:
            self.trace = trace

        if dump is not None:
            self.dump = dump

        if split_crlf is not None:
            self.split_crlf = split_crlf

        if heap_default is not None:
            self.heap_default = heap_default

        return self

    def load(self, path: Path):
        config = tomllib.loads(path.read_text())
        section = config.get('interpreter', {})

        unknown = set(section) - set(self.TYPES)

        if unknown:
            raise UserWarning(f'Unknown interpreter settings {sorted(unknown)} in {path}')

        for key, value in section.items():
            # bool is an int subclass, so compare exact types
            if type(value) is not self.TYPES[key]:
                raise UserWarning(f'Setting {key} = {value!r} in {path} is not {self.TYPES[key].__name__}')

        lg.debug(f'Settings from {path}: {section}')
        return self.update(**section)
