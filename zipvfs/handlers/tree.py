# python
"""
zipvfs/handlers/tree.py
Handler for `tree`, drawn from the filesystem snapshot of a directory.
"""
from ..errors import ZipFSError
from ..router import error_message, resolve_target


def _draw(node, prefix, lines, counts):
    children = node.get("children", [])
    for i, child in enumerate(children):
        last = i == len(children) - 1
        lines.append(f"{prefix}{'`-- ' if last else '|-- '}{child['name']}")
        if child["type"] == "dir":
            counts[0] += 1
            _draw(child, prefix + ("    " if last else "|   "), lines, counts)
        else:
            counts[1] += 1


async def run(session, fs, argv):
    args = [arg for arg in argv[1:] if not arg.startswith("-")]
    target = args[0] if args else "."
    try:
        snapshot = fs.snapshot(resolve_target(session, target))
    except ZipFSError as e:
        return error_message("tree", target, e)
    if snapshot["type"] != "dir":
        return f"{target} [error opening dir]"
    lines = [target]
    counts = [0, 0]
    _draw(snapshot, "", lines, counts)
    lines.append("")
    lines.append(f"{counts[0]} directories, {counts[1]} files")
    return "\n".join(lines)
