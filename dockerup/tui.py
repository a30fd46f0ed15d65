"""Interactive prompts.

- questionary for styled prompts when a TTY is available
- plain click output plus a line read through the event loop otherwise
- every prompt defaults to the safe answer (No)

Prompts are coroutines: they run inside the pipeline's event loop, so a
SIGINT/SIGTERM delivered while the operator is being asked cancels the run
like it would during any other step.
"""

import asyncio
import os
import stat
import sys

import click
import questionary
from prompt_toolkit.styles import Style

PROMPT_STYLE = Style(
    [
        ("qmark", "fg:ansiyellow bold"),
        ("question", "bold"),
        ("answer", "fg:ansicyan bold"),
    ]
)

YES_ANSWERS = ("y", "yes")


async def read_line(stream) -> str:
    """Read one line from ``stream`` without blocking the event loop.

    Pipes and sockets are read through the loop so the read can be
    cancelled. Anything that cannot be polled (regular files, /dev/null,
    in-memory streams) is read directly since it never blocks.
    """
    try:
        fd = stream.fileno()
        mode = os.fstat(fd).st_mode
        pollable = stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode)
    except (OSError, ValueError):
        pollable = False
    if not pollable:
        return stream.readline()

    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    # Own descriptor: closing the transport must not close stdin itself.
    pipe = os.fdopen(os.dup(fd), "rb", buffering=0)
    transport, _ = await loop.connect_read_pipe(
        lambda: asyncio.StreamReaderProtocol(reader), pipe
    )
    try:
        line = await reader.readline()
    finally:
        transport.close()
        os.set_blocking(fd, True)
    return line.decode(errors="replace")


async def confirm(question: str) -> bool:
    """Ask a yes/no question, defaulting to No.

    Ctrl+C at the TTY prompt, EOF and anything that is not an explicit yes
    count as No.
    """
    if sys.stdin.isatty():
        prompt = questionary.confirm(
            question, default=False, qmark="ℹ", style=PROMPT_STYLE
        )
        try:
            # SIGINT stays with the installer's handler; Ctrl+C arrives as a key.
            answer = await prompt.application.run_async(handle_sigint=False)
        except KeyboardInterrupt:
            return False
        return bool(answer)

    click.echo(f"{question} [y/N]: ", nl=False)
    answer = await read_line(sys.stdin)
    if not answer.endswith("\n"):
        click.echo("")
    return answer.strip().lower() in YES_ANSWERS
