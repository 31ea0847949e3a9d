"""
File checksum utilities for downloaded bills and statements.
"""

import hashlib
import hmac

from ..constants import DOWNLOAD_CHUNK_SIZE, HashType
from ..exceptions import ValidationError

_HASH_NAMES = {
    HashType.SHA1.value: 'sha1',
    HashType.SHA256.value: 'sha256',
    HashType.MD5.value: 'md5',
}


def new_hasher(hash_type: str = HashType.SHA1.value):
    """
    Create a hashlib object for a gateway hash type name.

    Args:
        hash_type: Name such as "SHA1" or "sha-256"

    Raises:
        ValidationError: If the hash type is not supported
    """
    hash_type = getattr(hash_type, 'value', hash_type) or HashType.SHA1.value
    normalized = str(hash_type).upper().replace('-', '')
    try:
        return hashlib.new(_HASH_NAMES[normalized])
    except KeyError:
        raise ValidationError(f"Unsupported hash type: {hash_type}")


def file_checksum(file_path: str, hash_type: str = HashType.SHA1.value) -> tuple:
    """
    Read a file back from disk and hash its contents.

    Returns:
        Tuple of (lowercase hex digest, total bytes read)
    """
    hasher = new_hasher(hash_type)
    total = 0
    with open(file_path, 'rb') as fh:
        for chunk in iter(lambda: fh.read(DOWNLOAD_CHUNK_SIZE), b''):
            hasher.update(chunk)
            total += len(chunk)
    return hasher.hexdigest(), total


def checksum_matches(actual: str, expected: str) -> bool:
    """Compare two hex digests case-insensitively in constant time."""
    return hmac.compare_digest(
        actual.lower().encode('utf-8'),
        expected.strip().lower().encode('utf-8')
    )
