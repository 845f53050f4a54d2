import hashlib

ID_LEN = 40


def _to_bytes(field):
    if isinstance(field, bytes):
        return field
    if isinstance(field, str):
        return field.encode()
    return str(field).encode()


def hash_fields(*fields):
    """SHA-1 hex digest over an ordered sequence of fields.

    Every field is length-prefixed, so ``("ab", "c")`` and ``("a", "bc")``
    hash differently and so does any reordering.
    """
    sha1 = hashlib.sha1()
    for field in fields:
        data = _to_bytes(field)
        sha1.update(f"{len(data)}\0".encode())
        sha1.update(data)
    return sha1.hexdigest()
