from __future__ import annotations

import logging
import mimetypes
import os
import secrets
import time
from typing import Dict, List, Optional

from werkzeug.datastructures import FileStorage, MultiDict
from werkzeug.utils import secure_filename

from onboarding_api.common.errors import StorageError, UploadError

log = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 2 * 1024 * 1024
DEFAULT_TYPES = ("application/pdf",)

# document slot -> accepted MIME types
ALLOWED_TYPES = {
    "emp_profile_pic": ("image/jpeg", "image/png"),
    "emp_ssc_doc": DEFAULT_TYPES,
    "emp_inter_doc": DEFAULT_TYPES,
    "emp_grad_doc": DEFAULT_TYPES,
    "resume": DEFAULT_TYPES,
    "id_proof": ("application/pdf", "image/jpeg", "image/png"),
    "signed_document": DEFAULT_TYPES,
    **{f"emp_offer_letter_{i}": DEFAULT_TYPES for i in (1, 2, 3)},
    **{f"emp_relieving_letter_{i}": DEFAULT_TYPES for i in (1, 2, 3)},
    **{f"emp_experience_certificate_{i}": DEFAULT_TYPES for i in (1, 2, 3)},
    **{f"emp_extra_doc_{i}": DEFAULT_TYPES for i in (4, 5)},
}


def allowed_types(slot: str):
    return ALLOWED_TYPES.get(slot, DEFAULT_TYPES)


def _stream_size(fs: FileStorage) -> int:
    stream = fs.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def collect_uploads(files: MultiDict, max_bytes: int = MAX_UPLOAD_BYTES) -> Dict[str, FileStorage]:
    """
    Check every uploaded part against the slot policy and return slot -> file.
    Parts with an empty filename (unselected file inputs) are ignored.
    Nothing touches the disk here.
    """
    out: Dict[str, FileStorage] = {}
    for slot in files:
        parts = [f for f in files.getlist(slot) if f and f.filename]
        if not parts:
            continue
        if slot not in ALLOWED_TYPES:
            raise UploadError(f"Unexpected file field: {slot}", field=slot)
        if len(parts) > 1:
            raise UploadError(f"Only one file allowed for {slot}", field=slot)
        fs = parts[0]
        allowed = allowed_types(slot)
        if fs.mimetype not in allowed:
            log.warning("rejected upload %s: %s", slot, fs.mimetype)
            raise UploadError(
                f"Invalid file type for {slot}. Allowed types: {', '.join(allowed)}", field=slot
            )
        if _stream_size(fs) > max_bytes:
            raise UploadError(
                f"File too large for {slot} (max {max_bytes // (1024 * 1024)} MB)", field=slot
            )
        out[slot] = fs
    return out


def unique_name(fs: FileStorage) -> str:
    """`<epoch-millis>-<random>.<ext>`; extension from the sanitised client name, else from the MIME type."""
    ext = os.path.splitext(secure_filename(fs.filename or ""))[1].lower()
    if not ext:
        ext = mimetypes.guess_extension(fs.mimetype or "") or ""
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


class UploadBatch:
    """
    The files of one submission.

    `reference(slot)` assigns a stored name to an uploaded slot and returns the
    relative URL path recorded on the row; nothing is written until `persist()`.
    `discard()` removes everything `persist()` wrote and never raises.
    """

    def __init__(self, uploads: Dict[str, FileStorage], folder: str, url_prefix: str = "/uploads"):
        self.uploads = uploads
        self.folder = folder
        self.url_prefix = "/" + url_prefix.strip("/")
        self._names: Dict[str, str] = {}
        self.written: List[str] = []

    def has(self, slot: str) -> bool:
        return slot in self.uploads

    def reference(self, slot: str) -> Optional[str]:
        fs = self.uploads.get(slot)
        if fs is None:
            return None
        if slot not in self._names:
            self._names[slot] = unique_name(fs)
        return f"{self.url_prefix}/{self._names[slot]}"

    def persist(self) -> None:
        try:
            os.makedirs(self.folder, exist_ok=True)
        except OSError as e:
            raise StorageError("Upload folder is not writable", payload=str(e)) from e
        for slot, name in self._names.items():
            path = os.path.join(self.folder, name)
            # tracked before the write so a partial file is cleaned up too
            self.written.append(path)
            try:
                self.uploads[slot].save(path)
            except OSError as e:
                raise StorageError(f"Could not store file for {slot}", payload=str(e)) from e
            log.info("stored %s as %s", slot, name)

    def discard(self) -> None:
        for path in self.written:
            try:
                os.remove(path)
                log.info("cleaned up %s", path)
            except OSError as e:
                log.error("file cleanup failed for %s: %s", path, e)
        self.written = []
