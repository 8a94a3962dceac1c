"""
Remote file upload for file inputs.

A remote browser can only pick files that exist on the machine it runs on.
When every keystroke token sent to an element names an existing local path,
each file is zipped, base64-encoded and POSTed to the session's ``/file``
endpoint; the server unpacks it and answers with the path it stored the file
under. The remote paths, joined by newlines, replace the original keys.
"""

from __future__ import annotations

import base64
import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from . import http
from .core import Element
from .exceptions import UploadError
from .keys import SpecialKey, to_text

logger = logging.getLogger(__name__)

UploadFn = Callable[[Element, str], str]


def is_local_file(token: Any) -> bool:
    """Return True when ``token`` renders to the path of an existing regular file."""
    if isinstance(token, SpecialKey):
        return False
    text = to_text(token)
    return bool(text) and os.path.isfile(text)


def make_archive(path: Union[str, Path]) -> bytes:
    """Zip the file at ``path`` into a single entry named after its base name."""
    source = Path(path)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.write(source, arcname=source.name)
    return buffer.getvalue()


def encode_archive(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def upload_file(element: Element, path: str) -> str:
    """Upload one local file and return the path the remote end stored it under."""
    endpoint = f"{element.session_url}/file"
    payload = {"file": encode_archive(make_archive(path))}
    response = http.request("POST", endpoint, payload, timeout=getattr(element.client, "timeout", None))
    remote_path = response.get("value")
    if not isinstance(remote_path, str) or not remote_path:
        raise UploadError(f"Upload of {path} to {endpoint} returned no remote path")
    logger.debug("Uploaded %s to %s", path, remote_path)
    return remote_path


def substitute_local_files(element: Element, keys: Any, upload: Optional[UploadFn] = None) -> Any:
    """
    Replace ``keys`` with the newline-joined remote paths of the files they name.

    Substitution is all or nothing: unless every token names an existing local
    path, ``keys`` is returned unchanged.
    """
    if isinstance(keys, (str, SpecialKey)):
        tokens: List[Any] = [keys]
    else:
        if not isinstance(keys, (list, tuple)):
            keys = list(keys)
        tokens = list(keys)
    if not tokens or not all(is_local_file(token) for token in tokens):
        return keys
    upload = upload or upload_file
    remote_paths = [upload(element, to_text(token)) for token in tokens]
    return "\n".join(remote_paths)
