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

import typer

from patchbundle.commands.loading import load_bundle
from patchbundle.context import GlobalContext
from patchbundle.core.exceptions import handle_patchbundle_exception


@handle_patchbundle_exception
def main(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Diff file or archive bundle to convert."),
    arcbundle: bool | None = typer.Option(
        None,
        "--arcbundle/--diff",
        help="Treat SOURCE as an archive bundle or as diff text. Guessed from the file name by default.",
    ),
) -> None:
    """Print SOURCE as a patch for `git apply`, including binary files.

    Examples:
        patchbundle git-patch changes.arcbundle > changes.patch

        patchbundle --conduit-uri https://phab.example.com git-patch changes.diff
    """
    global_context: GlobalContext = ctx.obj
    bundle = load_bundle(global_context, source, arcbundle)
    typer.echo(
        bundle.to_git_patch(context=global_context.config.context_lines), nl=False
    )
