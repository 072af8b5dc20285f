"""Minimal console_repl application.

Registers the default commands, keeps history in ``history.txt`` and adds a
``hello-world`` command that echoes its arguments. Settings can be
overridden in ``.console/config.toml``, which is created on first run.

Usage:
    uv run python -m examples.hello_world
"""

from __future__ import annotations

import asyncio

from console_repl import Command, Config, Console, Context

PROMPT = "\x1b[0;31m>> \x1b[0m"


def example_config() -> Config:
    """Settings used when the config file does not override them."""
    return Config(
        app_name="example",
        app_version="2.0.0",
        default_prompt=PROMPT,
        history_path="history.txt",
    )


def setup_console(console: Console) -> None:
    """Add the default commands and ``hello-world``."""
    console.add_default_commands()

    def hello_world(ctx: Context) -> None:
        console.output.print(
            "Hello, World! Arguments:", " ".join(ctx.arguments), markup=False,
        )

    console.add_command(
        Command(
            name="hello-world",
            description="Print 'Hello, world!' and arguments.",
            handler=hello_world,
        )
    )


async def main() -> None:
    """Entry point for the example application."""
    with Console.from_config_file(config=example_config()) as console:
        setup_console(console)

        # Try these at the prompt:
        #   help
        #   hello-world a b c
        #   history
        #   exit
        await console.run()


if __name__ == "__main__":
    asyncio.run(main())
