# python
"""
zipvfs/handlers/stat.py
Handler for `stat` returning a coreutils-like description of one path.
"""
import stat as stat_mod

from ..errors import ZipFSError
from ..router import error_message, resolve_target


async def run(session, fs, argv):
    operands = [arg for arg in argv[1:] if not arg.startswith("-")]
    if not operands:
        return "stat: missing operand"
    blocks = []
    for operand in operands:
        try:
            info = fs.stat(resolve_target(session, operand))
        except ZipFSError as e:
            blocks.append(error_message("stat", operand, e))
            continue
        kind = "directory" if info.is_dir else "regular file"
        modified = info.mod_time.isoformat(sep=" ") if info.mod_time else "-"
        blocks.append(
            "\n".join(
                [
                    f"  File: {operand}",
                    f"  Size: {info.size:<10} {kind}",
                    f"Access: ({info.mode & 0o7777:04o}/{stat_mod.filemode(info.mode)})",
                    f"Modify: {modified}",
                ]
            )
        )
    return "\n".join(blocks)
