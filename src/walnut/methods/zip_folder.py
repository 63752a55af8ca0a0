"""Zip a folder into an archive."""

from __future__ import annotations

import asyncio
import zipfile
from pathlib import Path

from walnut.context.shared import SharedContext


def _zip_directory(source: Path, output: Path) -> int:
    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for file in sorted(source.rglob("*")):
            archive.write(file, file.relative_to(source))
    return output.stat().st_size


async def zip_folder(ctx: SharedContext) -> str:
    """@walnut_method
    name: Zip Folder
    description: Creates a zip archive from ${folderPath} to ${outputPath}
    actionType: custom_zip_folder
    context: shared
    needsLocator: false
    category: Data Processing
    """
    # args follow the ${...} markers of the step description
    source = Path(ctx.args[0])
    output = Path(ctx.args[1]) if len(ctx.args) > 1 and ctx.args[1] else Path(f"{source}.zip")

    if not source.is_dir():
        raise NotADirectoryError(f"Not a folder: {source}")

    ctx.log(f"Zipping folder: {source}")
    size = await asyncio.to_thread(_zip_directory, source, output)
    ctx.log(f"Created {output} ({size} bytes)")
    ctx.set_variable("zipPath", str(output))
    return str(output)
