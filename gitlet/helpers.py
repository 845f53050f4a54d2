from .models import Blob, Commit

BLOB = "blob"
COMMIT = "commit"


def encode_object(obj_type, body):
    header = f"{obj_type} {len(body)}\0".encode()
    return header + body


def load_object(raw):
    null_index = raw.find(b'\0')
    if null_index < 0:
        raise ValueError("object has no header")
    header = raw[:null_index].decode()
    obj_type, size = header.split(' ')
    body = raw[null_index + 1:]
    if int(size) != len(body):
        raise ValueError(f"expected {size} bytes of {obj_type}, got {len(body)}")
    return obj_type, body


def object_type(raw):
    return raw[:raw.find(b' ')].decode()


def dump_blob(blob: Blob) -> bytes:
    header = f"name {blob.file_name}\n".encode()
    if blob.content is None:
        return header
    return header + b"\n" + blob.content


def parse_blob(body: bytes) -> Blob:
    header, sep, content = body.partition(b"\n\n")
    if not sep:
        header = body.rstrip(b"\n")
    file_name = header.decode().split(" ", 1)[1]
    return Blob.of(file_name, content if sep else None)


def dump_commit(commit: Commit) -> bytes:
    lines = [f"date {commit.timestamp}"]
    lines += [f"parent {parent}" for parent in commit.parents]
    lines += [f"file {commit.files[name]} {name}" for name in sorted(commit.files)]
    return ("\n".join(lines) + "\n\n" + commit.message).encode()


def parse_commit(body: bytes) -> Commit:
    header, message = body.decode().split("\n\n", 1)
    timestamp = 0
    parents = []
    files = {}
    for line in header.splitlines():
        if line.startswith("date "):
            timestamp = int(line.split(" ", 1)[1])
        elif line.startswith("parent "):
            parents.append(line.split(" ", 1)[1])
        elif line.startswith("file "):
            _, blob_id, name = line.split(" ", 2)
            files[name] = blob_id
    return Commit.create(message, parents, files, timestamp=timestamp)
