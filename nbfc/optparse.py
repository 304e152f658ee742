"""A small state-machine command line parser with exclusive groups and positionals."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, Union

__all__ = [
    "ParseErrorKind",
    "OptionError",
    "Option",
    "IncludeOptions",
    "ExclusiveGroup",
    "EndExclusiveGroup",
    "OptionParser",
    "str_error",
    "NARGS_MASK",
    "NARGS_OPTIONAL",
    "NARGS_ANY",
    "NARGS_SOME",
    "REQUIRED",
    "NO_SEPARATE_OPTIONALS",
    "NO_OPTIONS_AS_ARGUMENTS",
    "NO_SHORT_LONG_OPTS",
    "NO_ABBREVIATED_OPTS",
    "OPTIONS_PYTHON",
    "OPTIONS_GETOPT",
]

# Number of arguments an option takes: 0, 1, '?', '*' or '+'.
NARGS_MASK = 0x3F
NARGS_OPTIONAL = ord("?")
NARGS_ANY = ord("*")
NARGS_SOME = ord("+")

REQUIRED = 0x40

NO_SEPARATE_OPTIONALS = 0x01000000
NO_OPTIONS_AS_ARGUMENTS = 0x02000000
NO_SHORT_LONG_OPTS = 0x04000000
NO_ABBREVIATED_OPTS = 0x08000000

OPTIONS_PYTHON = NO_OPTIONS_AS_ARGUMENTS
OPTIONS_GETOPT = NO_SEPARATE_OPTIONALS

_DELIMITERS = " |,"
_MAX_POSITIONALS = 32


class ParseErrorKind(enum.IntEnum):
    """Parser error codes."""

    SUCCESS = 0
    MUTUALLY_EXCLUSIVE = 1
    UNKNOWN_OPTION = 2
    ARGUMENT_REQUIRED = 3
    TOO_MANY_ARGUMENTS = 4
    UNKNOWN = 5


_MESSAGES = {
    ParseErrorKind.SUCCESS: "Success",
    ParseErrorKind.MUTUALLY_EXCLUSIVE: "Mutual exclusion conflict",
    ParseErrorKind.UNKNOWN_OPTION: "Unknown option",
    ParseErrorKind.ARGUMENT_REQUIRED: "Argument required",
    ParseErrorKind.TOO_MANY_ARGUMENTS: "Too many arguments",
    ParseErrorKind.UNKNOWN: "Unknown error",
}


def str_error(code: int) -> str:
    """Return the message for an error code; out-of-range codes give "Unknown error"."""
    try:
        kind = ParseErrorKind(code)
    except ValueError:
        kind = ParseErrorKind.UNKNOWN
    return _MESSAGES[kind]


class OptionError(Exception):
    """Raised when the command line cannot be parsed."""

    def __init__(
        self,
        kind: ParseErrorKind,
        option: str | None = None,
        argument: str | None = None,
    ) -> None:
        self.kind = kind
        self.option = option
        self.argument = argument
        text = str_error(kind)
        if option:
            text = f"{option}: {text}"
        if argument:
            text = f"{text}: {argument}"
        super().__init__(text)


@dataclass(frozen=True)
class Option:
    """An option: names delimited by ' ', '|' or ',', the value returned for it, and its flags."""

    optstring: str
    value: Any
    flags: int = 0


@dataclass(frozen=True)
class IncludeOptions:
    """Splice another option list in place."""

    options: Sequence["OptionItem"]


@dataclass(frozen=True)
class ExclusiveGroup:
    """Start a group of mutually exclusive options."""

    name: str = ""
    flags: int = 0


@dataclass(frozen=True)
class EndExclusiveGroup:
    """End the current exclusive group."""


OptionItem = Union[Option, IncludeOptions, ExclusiveGroup, EndExclusiveGroup]


class _State(enum.Enum):
    UNINITIALIZED = "uninitialized"
    POSITIONAL = "positional"
    SHORT_OPT = "short_opt"
    LONG_OPT = "long_opt"
    SHORT_PARAMETER = "short_parameter"
    LONG_PARAMETER = "long_parameter"
    OPTIONS_END = "options_end"
    NEXT_WORD = "next_word"
    EOF = "EOF"


class _Op(enum.Enum):
    IS_EOF = "op_is_eof"
    GETOPTARG = "op_getoptarg"
    GETARG = "op_getarg"
    NEXT = "op_next_state"
    REWIND_SHORT_OPT = "op_rewind_short_opt"


@dataclass
class _Entry:
    option: Option
    group: int
    count: int = 0
    long_names: list[str] = field(default_factory=list)


def _argument_is_required(flags: int) -> bool:
    return (flags & NARGS_MASK) not in (NARGS_OPTIONAL, NARGS_ANY, 0)


def _is_negative_number(text: str) -> bool:
    if not text.startswith("-"):
        return False
    digits = 0
    for c in text[1:]:
        if c.isascii() and c.isdigit():
            digits += 1
        elif c in ".,":
            continue
        else:
            return digits > 0
    return True


def _tokens(optstring: str) -> Iterable[tuple[int, str]]:
    i, n = 0, len(optstring)
    while i < n:
        ndashes = (optstring[i] == "-") + (i + 1 < n and optstring[i + 1] == "-")
        i += ndashes
        start = i
        while i < n and optstring[i] not in _DELIMITERS:
            i += 1
        name = optstring[start:i]
        while i < n and optstring[i] in _DELIMITERS:
            i += 1
        yield ndashes, name


def _next_state(word: str) -> _State:
    if word.startswith("--"):
        return _State.LONG_OPT if len(word) > 2 else _State.OPTIONS_END
    if word.startswith("-"):
        return _State.SHORT_OPT if len(word) > 1 else _State.POSITIONAL
    return _State.POSITIONAL


class OptionParser:
    """Parse argv one option at a time; get_opt() returns the matched option's value."""

    def __init__(
        self,
        argv: Sequence[str],
        options: Sequence[OptionItem],
        flags: int = 0,
    ) -> None:
        self._argv = list(argv)
        self.flags = flags
        self.argi = 0
        self.optopt: str | None = None
        self.optarg: str | None = None
        self.error = ParseErrorKind.SUCCESS
        self._state = _State.UNINITIALIZED
        self._arg_off = 0
        self._arg_len = -1
        self._positional_count = 0
        self._end_of_options = False
        self._groups_count = 0
        self._groups = 0
        self._entries: list[_Entry] = []
        self._short: dict[str, _Entry] = {}
        self._positional: list[_Entry] = []
        self.set_options(options, True)

    # -- option table ---------------------------------------------------------

    def set_options(self, options: Sequence[OptionItem], reset: bool = False) -> None:
        """Replace the option table; usage counts of options at the same positions are kept."""
        old = self._entries
        self._entries = []
        self._short = {}
        self._positional = []
        if reset:
            self._groups_count = 0
            self._groups = 0
        self._register(options, False)
        for index, entry in enumerate(self._entries[: len(old)]):
            entry.count = old[index].count

    def _register(self, options: Sequence[OptionItem], in_group: bool) -> None:
        for item in options:
            if isinstance(item, IncludeOptions):
                self._register(item.options, in_group)
            elif isinstance(item, ExclusiveGroup):
                self._groups_count += 1
                in_group = True
            elif isinstance(item, EndExclusiveGroup):
                in_group = False
            else:
                entry = _Entry(item, self._groups_count if in_group else 0)
                self._entries.append(entry)
                for ndashes, name in _tokens(item.optstring):
                    if ndashes == 0:
                        self._positional.append(entry)
                    elif ndashes == 1:
                        self._short[name[:1]] = entry
                    else:
                        entry.long_names.append(name)

    # -- state machine --------------------------------------------------------

    @property
    def _word(self) -> str:
        return self._argv[self.argi]

    def _state_ctl(self, op: _Op, flags: int) -> bool:
        while True:
            state = self._state

            if state is _State.UNINITIALIZED:
                self.argi = 0
                self.optopt = None
                self.optarg = None
                self.error = ParseErrorKind.SUCCESS
                self._arg_off = 0
                self._arg_len = -1
                self._positional_count = 0
                self._end_of_options = False
                self._state = _State.NEXT_WORD
                continue

            if state is _State.NEXT_WORD:
                if self.argi + 1 >= len(self._argv):
                    self._state = _State.EOF
                    continue
                self.argi += 1
                self._arg_off = 0
                self._arg_len = -1
                if self._end_of_options:
                    self._state = _State.POSITIONAL
                    continue
                word = self._word
                self._state = _next_state(word)
                if self._state is _State.SHORT_OPT:
                    self._arg_off = 1
                    self._arg_len = 1
                elif self._state is _State.LONG_OPT:
                    self._arg_off = 2
                    equals = word.find("=", 2)
                    self._arg_len = (equals if equals >= 0 else len(word)) - 2
                elif self._state is _State.OPTIONS_END:
                    self._end_of_options = True
                continue

            if state is _State.SHORT_OPT:
                if op is _Op.GETOPTARG:
                    if flags & NO_SEPARATE_OPTIONALS:
                        return not _argument_is_required(flags)
                    if flags & NO_OPTIONS_AS_ARGUMENTS and not _is_negative_number(self._word):
                        return not _argument_is_required(flags)
                    self.optarg = self._word
                    self._state = _State.NEXT_WORD
                    return True
                if op is _Op.NEXT:
                    if self._arg_off + 1 < len(self._word):
                        self._arg_off += 1
                        self._state = _State.SHORT_PARAMETER
                    else:
                        self._state = _State.NEXT_WORD
                    return True
                return False

            if state is _State.LONG_OPT:
                if op is _Op.GETOPTARG:
                    if flags & (NO_OPTIONS_AS_ARGUMENTS | NO_SEPARATE_OPTIONALS):
                        return not _argument_is_required(flags)
                    self.optarg = self._word
                    self._state = _State.NEXT_WORD
                    return True
                if op is _Op.NEXT:
                    if self._arg_off + self._arg_len < len(self._word):
                        self._arg_off += self._arg_len + 1
                        self._arg_len = -1
                        self._state = _State.LONG_PARAMETER
                    else:
                        self._state = _State.NEXT_WORD
                    return True
                return False

            if state is _State.SHORT_PARAMETER:
                if op in (_Op.GETOPTARG, _Op.NEXT):
                    if op is _Op.GETOPTARG:
                        self.optarg = self._word[self._arg_off:]
                    self._state = _State.NEXT_WORD
                    return True
                if op is _Op.REWIND_SHORT_OPT:
                    self._state = _State.SHORT_OPT
                    return True
                return False

            if state is _State.LONG_PARAMETER:
                if op in (_Op.GETOPTARG, _Op.NEXT):
                    if op is _Op.GETOPTARG:
                        self.optarg = self._word[self._arg_off:]
                    self._state = _State.NEXT_WORD
                    return True
                return False

            if state is _State.OPTIONS_END:
                if op is _Op.NEXT:
                    self._state = _State.NEXT_WORD
                    return True
                return False

            if state is _State.POSITIONAL:
                if op is _Op.GETOPTARG and flags & NO_SEPARATE_OPTIONALS and _argument_is_required(flags):
                    return False
                if op in (_Op.GETOPTARG, _Op.GETARG, _Op.NEXT):
                    if op is not _Op.NEXT:
                        self.optarg = self._word[self._arg_off:]
                    self._state = _State.NEXT_WORD
                    return True
                return False

            # EOF
            if op in (_Op.GETARG, _Op.GETOPTARG):
                return not _argument_is_required(flags)
            return op is _Op.IS_EOF

    def _match(self) -> _Entry | None:
        self._state_ctl(_Op.IS_EOF, 0)
        if self._state is _State.POSITIONAL:
            if self._positional_count < min(_MAX_POSITIONALS, len(self._positional)):
                return self._positional[self._positional_count]
        elif self._state is _State.SHORT_OPT:
            return self._short.get(self._word[self._arg_off : self._arg_off + 1])
        elif self._state is _State.LONG_OPT:
            name = self._word[self._arg_off : self._arg_off + self._arg_len]
            for entry in self._entries:
                if name in entry.long_names:
                    return entry
        return None

    def _fail(self, kind: ParseErrorKind) -> OptionError:
        self.error = kind
        return OptionError(kind, self.optopt, self.optarg)

    def _take(self, op: _Op, flags: int) -> str | None:
        if not self._state_ctl(op, self.flags | flags):
            raise self._fail(ParseErrorKind.ARGUMENT_REQUIRED)
        return self.optarg

    # -- public interface -----------------------------------------------------

    def get_opt(self) -> Any:
        """Return the value of the next option (its argument is in `optarg`), or None at the end."""
        while True:
            self.optarg = None
            entry = self._match()
            if entry is not None:
                break
            if self._state is _State.OPTIONS_END:
                self._state_ctl(_Op.NEXT, 0)
                continue
            if self._state is _State.EOF:
                return None
            self.optopt = self._word
            raise self._fail(ParseErrorKind.UNKNOWN_OPTION)

        option = entry.option
        self.optopt = option.optstring

        if entry.group and self._groups & (1 << (entry.group - 1)) and not entry.count:
            raise self._fail(ParseErrorKind.MUTUALLY_EXCLUSIVE)

        entry.count += 1
        if entry.group:
            self._groups |= 1 << (entry.group - 1)

        if self._state is _State.POSITIONAL:
            self._take(_Op.GETOPTARG, option.flags)
            self._positional_count += 1
            return option.value

        self._state_ctl(_Op.NEXT, 0)

        if option.flags & NARGS_MASK == 0:
            if self._state is _State.LONG_PARAMETER:
                raise self._fail(ParseErrorKind.TOO_MANY_ARGUMENTS)
            if self._state is _State.SHORT_PARAMETER:
                self._state_ctl(_Op.REWIND_SHORT_OPT, 0)
        else:
            self._take(_Op.GETOPTARG, option.flags)

        return option.value

    def get_optarg(self, flags: int = 0) -> str | None:
        """Read an option argument; None if it is optional and absent."""
        self.optarg = None
        return self._take(_Op.GETOPTARG, flags)

    def get_arg(self, flags: int = 0) -> str | None:
        """Read a positional argument; None if it is optional and absent."""
        self.optarg = None
        return self._take(_Op.GETARG, flags)

    def check_required(self) -> None:
        """Raise OptionError if a required option was never given."""
        for entry in self._entries:
            if entry.option.flags & REQUIRED and not entry.count:
                self.optopt = entry.option.optstring
                self.optarg = None
                raise self._fail(ParseErrorKind.ARGUMENT_REQUIRED)

    def at_end(self) -> bool:
        """True once every argument has been consumed."""
        return self._state_ctl(_Op.IS_EOF, 0)

    def explain_error(self, error: OptionError) -> str:
        """Write "prog: option: message: argument" to stderr and return it."""
        program = self._argv[0] if self._argv else ""
        text = f"{program}: "
        if error.option:
            text += f"{error.option}: "
        text += str_error(error.kind)
        if error.argument:
            text += f": {error.argument}"
        print(text, file=sys.stderr)
        return text