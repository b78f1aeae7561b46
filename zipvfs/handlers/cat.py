# python
"""
zipvfs/handlers/cat.py
Handler for `cat`: print archive file contents, decoded as UTF-8.
"""
from ..errors import ZipFSError
from ..router import error_message, resolve_target


async def run(session, fs, argv):
    """
    Concatenate each named file. Errors for one operand do not stop the
    others, as with the real command.
    """
    operands = [arg for arg in argv[1:] if arg != "-"]
    if not operands:
        return ""
    out = []
    for operand in operands:
        try:
            data = fs.read_file(resolve_target(session, operand))
        except ZipFSError as e:
            out.append(error_message("cat", operand, e))
            continue
        out.append(data.decode("utf-8", errors="replace"))
    return "\n".join(out)
