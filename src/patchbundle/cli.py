# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

from pathlib import Path

import typer
from loguru import logger

from patchbundle.commands import git_patch, pack, show, unified_diff
from patchbundle.constants import (
    ENV_APP_PREFIX,
    GLOBAL_CONFIG_FILE,
    LOCAL_CONFIG_FILE,
)
from patchbundle.context import GlobalConfig, GlobalContext
from patchbundle.core.config.config_loader import ConfigLoader
from patchbundle.core.exceptions import handle_patchbundle_exception
from patchbundle.core.logging.logging import setup_logger
from patchbundle.runtimeutil import (
    ensure_utf8_output,
    get_log_dir_callback,
    version_callback,
)

# create app
app = typer.Typer(
    help="patchbundle: convert changesets between unified diffs, git patches and archive bundles",
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    add_completion=False,
)

# attach commands
app.command(name="git-patch")(git_patch.main)
app.command(name="unified-diff")(unified_diff.main)
app.command(name="pack")(pack.main)
app.command(name="show")(show.main)


def setup_config_args(**kwargs):
    config_args = {}

    for key, item in kwargs.items():
        if item is not None:
            config_args[key] = item

    return config_args


@app.callback(invoke_without_command=True)
@handle_patchbundle_exception
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_path: bool = typer.Option(
        False,
        "--log-dir",
        "-LD",
        callback=get_log_dir_callback,
        is_eager=True,
        help="Show log path (where logs for patchbundle live) and exit",
    ),
    custom_config: str | None = typer.Option(
        None,
        "--custom-config",
        help="Path to a custom config file",
    ),
    context_lines: int | None = typer.Option(
        None,
        "--context",
        "-U",
        help="Lines of context to keep around each change when re-splitting hunks.",
    ),
    conduit_uri: str | None = typer.Option(
        None,
        "--conduit-uri",
        help="Conduit server to download binary blobs from.",
    ),
    conduit_token: str | None = typer.Option(
        None, "--conduit-token", help="API token for the conduit server"
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    silent: bool | None = typer.Option(
        None,
        "--silent",
        "-s",
        help="Do not log to the console.",
    ),
) -> None:
    """
    Global setup callback. Initialize shared objects here.
    """
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    ensure_utf8_output()

    # initial setup of logger, redone below once the config is known
    setup_logger(ctx.invoked_subcommand, debug=verbose or False, silent=silent or False)

    config_args = setup_config_args(
        context_lines=context_lines,
        conduit_uri=conduit_uri,
        conduit_token=conduit_token,
        verbose=verbose,
        silent=silent,
    )

    config, used_sources, used_defaults = ConfigLoader.get_full_config(
        GlobalConfig,
        config_args,
        LOCAL_CONFIG_FILE,
        ENV_APP_PREFIX,
        GLOBAL_CONFIG_FILE,
        Path(custom_config) if custom_config else None,
    )

    if config.verbose != bool(verbose) or config.silent != bool(silent):
        setup_logger(
            ctx.invoked_subcommand, debug=config.verbose, silent=config.silent
        )

    logger.debug(
        f"Config loaded from {used_sources} (defaults used: {used_defaults})"
    )

    ctx.obj = GlobalContext.from_global_config(config)


def run():
    app()


if __name__ == "__main__":
    run()
