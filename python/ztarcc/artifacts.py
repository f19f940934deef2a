"""Compiled artifact encoding shared by the compiler and the registry.

Each artifact is a zlib-compressed pickle of plain data (tuples, lists,
dicts, strings, ints). The manifest maps every pass to its artifact file.

Output structure:
    compiled/
    ├── manifest.json
    ├── FromChina.zpkl
    ├── ...
    ├── ToHongKong.zpkl
    └── keys.zpkl
"""

import io
import pickle
import zlib

ARTIFACT_FORMAT = 1
ARTIFACT_SUFFIX = ".zpkl"
MANIFEST_NAME = "manifest.json"
KEYS_NAME = "keys" + ARTIFACT_SUFFIX


class _PlainDataUnpickler(pickle.Unpickler):
    """Unpickler that refuses to resolve any global."""

    def find_class(self, module, name):
        raise pickle.UnpicklingError(f"unexpected global {module}.{name}")


def encode(obj, level: int = 6) -> bytes:
    """Serialize and compress plain data."""
    return zlib.compress(pickle.dumps(obj, protocol=pickle.HIGHEST_PROTOCOL), level)


def decode(blob: bytes):
    """Decompress and deserialize an artifact.

    Raises:
        zlib.error: On a corrupt compressed stream.
        pickle.UnpicklingError: On a corrupt or unexpected payload.
    """
    payload = zlib.decompress(blob)
    try:
        return _PlainDataUnpickler(io.BytesIO(payload)).load()
    except (EOFError, IndexError, TypeError, ValueError) as e:
        raise pickle.UnpicklingError(str(e)) from e
