"""Transform engine applying an operation chain to line-oriented text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from core.domain.operations import (
    AddPrefixSuffixSettings,
    CaseType,
    ChangeCaseSettings,
    DeduplicateSettings,
    Operation,
    OperationChain,
    OperationKind,
    RegexReplaceSettings,
    RemoveCharactersSettings,
)

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
}
_WORD = re.compile(r"\S+")
_TEMPLATE_TOKEN = re.compile(r"\$(?:(\$)|(&)|(`)|(')|(\d{1,2})|<([^>]*)>)")

Lines = List[str]
Transform = Callable[[Sequence[str], object], Lines]


class InvalidPatternError(ValueError):
    """Raised when a regex pattern or its flags are unusable."""


@dataclass(frozen=True)
class Diagnostic:
    """A recovered failure reported against one operation of the chain."""

    operation_id: str
    code: str
    message: str


@dataclass(frozen=True)
class TransformResult:
    """Output of applying a chain, with the diagnostics collected on the way."""

    text: str
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def compile_pattern(pattern: str, flags: str) -> Tuple[re.Pattern, bool]:
    """Compile ``pattern`` with letter ``flags``; return it and the global flag."""
    if len(set(flags)) != len(flags):
        raise InvalidPatternError(f"Duplicate regex flags: {flags!r}")
    value = 0
    replace_all = False
    for letter in flags:
        if letter == "g":
            replace_all = True
        elif letter in _REGEX_FLAGS:
            value |= _REGEX_FLAGS[letter]
        else:
            raise InvalidPatternError(f"Unsupported regex flag: {letter!r}")
    try:
        return re.compile(pattern, value), replace_all
    except re.error as exc:
        raise InvalidPatternError(f"Invalid pattern {pattern!r}: {exc}") from exc


def remove_characters(lines: Sequence[str], settings: RemoveCharactersSettings) -> Lines:
    if not settings.characters:
        return list(lines)
    charset = re.compile("[" + re.escape(settings.characters) + "]")
    return [charset.sub("", line) for line in lines]


def expand_template(template: str, match: re.Match) -> str:
    """Expand JS-style $n, $<name>, $&, $`, $' and $$ sequences for ``match``.

    Unresolvable ``$`` sequences are kept literally; backslashes carry no
    special meaning.
    """
    group_count = match.re.groups
    names = match.re.groupindex

    def substitute(token: re.Match) -> str:
        dollar, whole, before, after, digits, name = token.groups()
        if dollar:
            return "$"
        if whole:
            return match.group(0)
        if before:
            return match.string[: match.start()]
        if after:
            return match.string[match.end() :]
        if digits is not None:
            if len(digits) == 2 and 1 <= int(digits) <= group_count:
                return match.group(int(digits)) or ""
            first = int(digits[0])
            if 1 <= first <= group_count:
                return (match.group(first) or "") + digits[1:]
            return token.group(0)
        if not names:
            return token.group(0)
        return (match.group(name) or "") if name in names else ""

    return _TEMPLATE_TOKEN.sub(substitute, template)


def regex_replace(lines: Sequence[str], settings: RegexReplaceSettings) -> Lines:
    regex, replace_all = compile_pattern(settings.pattern, settings.flags)
    count = 0 if replace_all else 1
    template = settings.replacement
    if "$" not in template:
        return [regex.sub(lambda _: template, line, count=count) for line in lines]
    return [
        regex.sub(lambda m: expand_template(template, m), line, count=count)
        for line in lines
    ]


def _capitalize_word(match: re.Match) -> str:
    word = match.group(0)
    return word[:1].upper() + word[1:].lower()


def change_case(lines: Sequence[str], settings: ChangeCaseSettings) -> Lines:
    case_type = settings.case_type
    if case_type is CaseType.UPPERCASE:
        return [line.upper() for line in lines]
    if case_type is CaseType.LOWERCASE:
        return [line.lower() for line in lines]
    if case_type is CaseType.CAPITALIZE:
        return [_WORD.sub(_capitalize_word, line) for line in lines]
    return [line[:1].upper() + line[1:].lower() for line in lines]


def deduplicate(lines: Sequence[str], settings: DeduplicateSettings) -> Lines:
    if settings.preserve_order:
        # dict keeps insertion order, so first occurrences win
        return list(dict.fromkeys(lines))
    return sorted(set(lines))


def remove_empty_lines(lines: Sequence[str], settings: object = None) -> Lines:
    return [line for line in lines if line.strip()]


def trim_whitespace(lines: Sequence[str], settings: object = None) -> Lines:
    return [line.strip() for line in lines]


def add_prefix_suffix(lines: Sequence[str], settings: AddPrefixSuffixSettings) -> Lines:
    if not settings.prefix and not settings.suffix:
        return list(lines)
    return [f"{settings.prefix}{line}{settings.suffix}" for line in lines]


TRANSFORMS: Dict[OperationKind, Transform] = {
    OperationKind.REMOVE_CHARACTERS: remove_characters,
    OperationKind.REGEX_REPLACE: regex_replace,
    OperationKind.CHANGE_CASE: change_case,
    OperationKind.DEDUPLICATE: deduplicate,
    OperationKind.REMOVE_EMPTY_LINES: remove_empty_lines,
    OperationKind.TRIM_WHITESPACE: trim_whitespace,
    OperationKind.ADD_PREFIX_SUFFIX: add_prefix_suffix,
}


def validate_operation(operation: Operation) -> Optional[str]:
    """Return a warning message when ``operation`` would be skipped, else None."""
    if operation.kind is OperationKind.REGEX_REPLACE:
        try:
            compile_pattern(operation.settings.pattern, operation.settings.flags)
        except InvalidPatternError as exc:
            return str(exc)
    return None


def _apply_operation(
    lines: Lines,
    operation: Operation,
    diagnostics: List[Diagnostic],
) -> Lines:
    transform = TRANSFORMS.get(operation.kind)
    if transform is None:
        logger.warning("No transform registered for %s; passing lines through", operation.kind)
        diagnostics.append(
            Diagnostic(operation.id, "UnknownOperationKind", f"Unknown kind: {operation.kind}")
        )
        return lines
    try:
        return transform(lines, operation.settings)
    except InvalidPatternError as exc:
        logger.warning("Skipping operation %s: %s", operation.id, exc)
        diagnostics.append(Diagnostic(operation.id, "InvalidPattern", str(exc)))
        return lines


def apply_chain(
    text: str,
    chain: OperationChain,
    preview_up_to_id: Optional[str] = None,
) -> TransformResult:
    """Apply the enabled operations of ``chain`` to ``text``.

    When ``preview_up_to_id`` names an operation of the chain, only the steps
    up to and including it are applied. Empty text short-circuits to an
    empty result.
    """
    if text == "":
        return TransformResult(text="")
    steps = chain.truncated(preview_up_to_id).enabled_steps()
    diagnostics: List[Diagnostic] = []
    lines = reduce(
        lambda acc, op: _apply_operation(acc, op, diagnostics),
        steps,
        text.split(LINE_SEPARATOR),
    )
    return TransformResult(
        text=LINE_SEPARATOR.join(lines),
        diagnostics=tuple(diagnostics),
    )


def apply(
    text: str,
    chain: OperationChain,
    preview_up_to_id: Optional[str] = None,
) -> str:
    """Return ``text`` transformed by ``chain``; see :func:`apply_chain`."""
    return apply_chain(text, chain, preview_up_to_id).text
