import posixpath

utf8_bom = b"\xef\xbb\xbf"

def strip_utf8_bom(data: bytes) -> bytes:
    # removes the utf-8 byte order mark from byte data if present.
    if data.startswith(utf8_bom):
        return data[len(utf8_bom):]
    return data

def decode_template_bytes(data: bytes) -> str:
    # template files are utf-8; a leading bom would end up in the output.
    return strip_utf8_bom(data).decode("utf-8")

def clean_source_path(path: str) -> str | None:
    # normalizes a slash-separated source path; None if it leaves the root.
    if not path or path.startswith("/") or "\\" in path or "\x00" in path:
        return None
    cleaned = posixpath.normpath(path)
    if cleaned == "..":
        return None
    if cleaned.startswith("../"):
        return None
    return cleaned
