# fedora-postinstall/postinstall/phases/cleanup.py

import tempfile
from pathlib import Path
from typing import List

from postinstall import console_output as con


def leftover_paths(tmp_dir: Path, patterns) -> List[Path]:
    found = []
    for pattern in patterns:
        found.extend(sorted(tmp_dir.glob(pattern)))
    return found


def run(ctx) -> None:
    con.print_sub_step("Removing unused packages...")
    ctx.run(["sudo", "dnf", "autoremove", "-y"])
    ctx.run(["sudo", "dnf", "clean", "all"])

    leftovers = leftover_paths(Path(tempfile.gettempdir()), ctx.section("cleanup").get("tmp_globs", []))
    if leftovers:
        con.print_sub_step(f"Removing {len(leftovers)} leftover item(s) from the temp directory...")
        # Some of these were created by root-run installers.
        ctx.run(["sudo", "rm", "-rf", "--"] + [str(p) for p in leftovers])
