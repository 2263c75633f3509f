"""Network splitter: compile one network or a sequence of networks.

Each network is lexed and compiled independently.  A load is
all-or-nothing: if any network fails, every network's failure is
collected into a single :class:`NetworkCompileFailed`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ilplc.model.hardware import RegisterBank
from ilplc.model.program import Network, Program

from ._compiler import compile_tokens
from ._errors import CompileError, NetworkCompileFailed
from ._lexer import tokenize

logger = logging.getLogger(__name__)


def compile_network(
    source: str,
    *,
    bank_sizes: dict[RegisterBank, int] | None = None,
    label: str | None = None,
) -> Network:
    """Compile a single network's IL text.

    Raises the first :class:`CompileError` encountered.
    """
    tokens = tokenize(source)
    statements = compile_tokens(tokens, bank_sizes=bank_sizes)
    return Network(label=label, source=source, statements=statements)


def compile_program(
    source: str | Sequence[str],
    *,
    bank_sizes: dict[RegisterBank, int] | None = None,
) -> Program:
    """Compile one network string or an ordered sequence of them.

    Raises
    ------
    NetworkCompileFailed
        One or more networks failed; ``.errors`` holds each failure with
        its ``network`` index set.
    TypeError
        *source* is neither a string nor a sequence of strings.
    """
    sources = _split_networks(source)

    networks: list[Network] = []
    errors: list[CompileError] = []
    for index, text in enumerate(sources):
        try:
            networks.append(
                compile_network(text, bank_sizes=bank_sizes, label=f"Network {index + 1}")
            )
        except CompileError as err:
            err.network = index
            logger.debug("network %d failed: %s", index + 1, err)
            errors.append(err)

    if errors:
        raise NetworkCompileFailed(errors)

    program = Program(networks=networks)
    logger.debug(
        "compiled %d network(s), %d statement(s)", len(networks), len(program),
    )
    return program


def _split_networks(source: str | Sequence[str]) -> list[str]:
    if isinstance(source, str):
        return [source]
    if isinstance(source, Sequence):
        for item in source:
            if not isinstance(item, str):
                raise TypeError(
                    f"networks must be strings, got {type(item).__name__}"
                )
        return list(source)
    raise TypeError(
        f"compile_program() expects a string or a sequence of strings, "
        f"got {type(source).__name__}"
    )
