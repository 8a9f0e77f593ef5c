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
from loguru import logger

from patchbundle.commands.loading import load_bundle
from patchbundle.context import GlobalContext
from patchbundle.core.exceptions import handle_patchbundle_exception
from patchbundle.core.logging.utils import time_block
from patchbundle.core.validation import validate_output_file


@handle_patchbundle_exception
def main(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Diff file (or archive) to pack."),
    output: str = typer.Argument(..., help="Where to write the archive bundle."),
    arcbundle: bool | None = typer.Option(
        None,
        "--arcbundle/--diff",
        help="Treat SOURCE as an archive bundle or as diff text. Guessed from the file name by default.",
    ),
) -> None:
    """Write SOURCE as a self-contained archive bundle.

    Binary blobs referenced by the changes are embedded, downloading them
    from the configured conduit server when needed.
    """
    global_context: GlobalContext = ctx.obj
    output_path = validate_output_file(output)
    bundle = load_bundle(global_context, source, arcbundle)

    with time_block("Pack"):
        bundle.write_to_disk(output_path)

    logger.success(f"Wrote {len(bundle.changes)} changes to {output_path}")
